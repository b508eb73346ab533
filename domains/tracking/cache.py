# domains/tracking/cache.py
from __future__ import annotations

import copy
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 5 * 60
DEMO_CACHE_TTL = 60


class TrackingCache:
    """
    조회 결과 캐시의 최소 공통 인터페이스.
    만료된 값은 절대 돌려주지 않는다.
    """

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, key: str, value: Dict[str, Any], ttl: float = DEFAULT_CACHE_TTL) -> None:
        raise NotImplementedError


class MemoryTrackingCache(TrackingCache):
    """
    프로세스 메모리 캐시 (key -> (expires_at, value)).
    - 백그라운드 정리 없음: 만료 항목은 get 시점에 삭제
    - 용량 제한 없음 (트래픽이 적고 항목이 스스로 만료되는 전제)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Dict[str, Any]]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() > expires_at:
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(value)
        except Exception:
            logger.warning("tracking cache read failed: key=%s", key, exc_info=True)
            return None

    def set(self, key: str, value: Dict[str, Any], ttl: float = DEFAULT_CACHE_TTL) -> None:
        try:
            self._entries[key] = (self._clock() + ttl, copy.deepcopy(value))
        except Exception:
            logger.warning("tracking cache write failed: key=%s", key, exc_info=True)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class DjangoTrackingCache(TrackingCache):
    """
    django.core.cache 백엔드 위임 (Redis/Memcached 등으로 교체 가능)
    """

    def __init__(self, alias: str = "default"):
        self.alias = alias

    @property
    def _backend(self):
        return caches[self.alias]

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            return self._backend.get(key)
        except Exception:
            logger.warning("tracking cache read failed: alias=%s key=%s", self.alias, key, exc_info=True)
            return None

    def set(self, key: str, value: Dict[str, Any], ttl: float = DEFAULT_CACHE_TTL) -> None:
        try:
            self._backend.set(key, value, timeout=ttl)
        except Exception:
            logger.warning("tracking cache write failed: alias=%s key=%s", self.alias, key, exc_info=True)


# 프로세스 전역 인스턴스 (warm 상태 동안 유지)
_memory_cache = MemoryTrackingCache()


def get_tracking_cache() -> TrackingCache:
    """TRACKING_CACHE_BACKEND 설정으로 캐시 구현을 고른다."""
    backend = (getattr(settings, "TRACKING_CACHE_BACKEND", "memory") or "memory").strip().lower()
    if backend == "django":
        return DjangoTrackingCache(getattr(settings, "TRACKING_CACHE_ALIAS", "default"))
    if backend != "memory":
        logger.warning("Unknown TRACKING_CACHE_BACKEND=%r, falling back to memory", backend)
    return _memory_cache
