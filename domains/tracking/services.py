# domains/tracking/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings

from .cache import DEFAULT_CACHE_TTL, DEMO_CACHE_TTL, TrackingCache, get_tracking_cache
from .demo import demo_not_found_payload, demo_payload
from .exceptions import UnexpectedPayloadShape
from .normalize import build_tracking, extract_tracking

logger = logging.getLogger(__name__)

PROVIDER_AFTERSHIP = "aftership"


@dataclass(frozen=True)
class TrackingQuery:
    tracking_number: str  # 대문자 + trim 완료
    slug: Optional[str] = None  # 소문자, "auto"/빈값은 None

    def cache_key(self, provider: str = PROVIDER_AFTERSHIP) -> str:
        return f"{provider}:{self.slug or 'auto'}:{self.tracking_number}"


@dataclass
class LookupResult:
    status_code: int
    payload: Dict[str, Any]


class TrackingLookupService:
    """
    운송장 조회 흐름:
      캐시 확인 → (제공자 미설정: 데모) → create → 실패 시 get → 둘 다 실패면 502
    재시도는 create→get 1회 폴백이 전부.
    """

    def __init__(
        self,
        *,
        cache: TrackingCache,
        adapter=None,
        provider: str = "",
        api_key: str = "",
        cache_ttl: float = DEFAULT_CACHE_TTL,
        demo_cache_ttl: float = DEMO_CACHE_TTL,
    ):
        self.cache = cache
        self.adapter = adapter
        self.provider = (provider or "").strip().lower()
        self.api_key = api_key or ""
        self.cache_ttl = cache_ttl
        self.demo_cache_ttl = demo_cache_ttl

    @property
    def provider_configured(self) -> bool:
        return bool(self.api_key) and self.provider == PROVIDER_AFTERSHIP and self.adapter is not None

    def lookup(self, query: TrackingQuery) -> LookupResult:
        key = query.cache_key()

        cached = self.cache.get(key)
        if cached:
            logger.info("tracking cache hit: %s", key)
            return LookupResult(200, {**cached, "cached": True})

        if not self.provider_configured:
            return self._lookup_demo(query, key)

        try:
            return self._lookup_provider(query, key)
        except Exception as e:
            logger.exception("Tracking lookup failed: %s", query.tracking_number)
            return LookupResult(
                500, {"ok": False, "message": f"Internal error calling AfterShip: {e}"}
            )

    # ------------------------------------------------------------------
    def _lookup_demo(self, query: TrackingQuery, key: str) -> LookupResult:
        payload = demo_payload(query.tracking_number)
        if payload is None:
            logger.info("demo mode: %s not in demo data", query.tracking_number)
            return LookupResult(200, demo_not_found_payload())
        self.cache.set(key, payload, self.demo_cache_ttl)
        return LookupResult(200, payload)

    def _lookup_provider(self, query: TrackingQuery, key: str) -> LookupResult:
        created = self.adapter.register(query.tracking_number, query.slug)
        if created.success:
            return self._resolve(query, key, created.body, stage="create")

        # 이미 등록된 운송장일 수 있음 → get 으로 폴백 (특정 상태코드를 가정하지 않음)
        logger.info(
            "AfterShip create failed (%s), falling back to get: %s",
            created.status_code,
            query.tracking_number,
        )
        fetched = self.adapter.fetch(query.tracking_number, query.slug)
        if fetched.success:
            return self._resolve(query, key, fetched.body, stage="get")

        logger.warning(
            "AfterShip create & get both failed: %s (create=%s, get=%s)",
            query.tracking_number,
            created.status_code,
            fetched.status_code,
        )
        return LookupResult(
            502,
            {
                "ok": False,
                "message": "AfterShip request failed on create & get",
                "create": created.as_dict(),
                "get": fetched.as_dict(),
            },
        )

    def _resolve(self, query: TrackingQuery, key: str, body: Any, *, stage: str) -> LookupResult:
        try:
            tracking = extract_tracking(body)
        except UnexpectedPayloadShape as e:
            logger.warning("AfterShip returned unexpected payload on %s: %s", stage, query.tracking_number)
            return LookupResult(
                200,
                {"ok": False, "message": f"AfterShip returned unexpected payload on {stage}", "raw": e.raw},
            )

        payload = {
            "ok": True,
            "provider": PROVIDER_AFTERSHIP,
            "tracking": build_tracking(tracking, query.tracking_number, query.slug),
        }
        self.cache.set(key, payload, self.cache_ttl)
        return LookupResult(200, payload)


def build_lookup_service(cache: Optional[TrackingCache] = None) -> TrackingLookupService:
    """Django settings 기준으로 서비스 조립 (요청마다 호출 → 설정 변경 즉시 반영)"""
    from .adapters import get_adapter

    provider = (getattr(settings, "TRACKING_PROVIDER", "") or "").strip().lower()
    api_key = getattr(settings, "AFTERSHIP_API_KEY", "") or ""

    adapter = None
    if provider and api_key:
        try:
            adapter = get_adapter(provider)
        except LookupError:
            logger.warning("No adapter for TRACKING_PROVIDER=%r, using demo data", provider)

    return TrackingLookupService(
        cache=cache if cache is not None else get_tracking_cache(),
        adapter=adapter,
        provider=provider,
        api_key=api_key,
        cache_ttl=getattr(settings, "TRACKING_CACHE_TTL", DEFAULT_CACHE_TTL),
        demo_cache_ttl=getattr(settings, "TRACKING_DEMO_CACHE_TTL", DEMO_CACHE_TTL),
    )


def lookup_tracking(query: TrackingQuery, cache: Optional[TrackingCache] = None) -> LookupResult:
    return build_lookup_service(cache).lookup(query)
