# tests/conftest.py
import json

import pytest
from rest_framework.test import APIClient

from domains.tracking import cache as cache_module
from domains.tracking.adapters import UpstreamResult
from domains.tracking.cache import MemoryTrackingCache


# ─────────────────────────────────────────────────────────────
# 전역 캐시 초기화 (테스트 간 캐시 공유 방지)
# ─────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _clear_tracking_cache():
    cache_module._memory_cache.clear()
    yield
    cache_module._memory_cache.clear()


# ─────────────────────────────────────────────────────────────
# 클라이언트 & 설정
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def demo_settings(settings):
    """제공자 미설정 → 데모 경로"""
    settings.TRACKING_PROVIDER = ""
    settings.AFTERSHIP_API_KEY = ""
    settings.TRACKING_CACHE_BACKEND = "memory"
    return settings


@pytest.fixture
def aftership_settings(settings):
    settings.TRACKING_PROVIDER = "aftership"
    settings.AFTERSHIP_API_KEY = "test-key"
    settings.AFTERSHIP_BASE_URL = "https://api.aftership.test/v4"
    settings.TRACKING_CACHE_BACKEND = "memory"
    return settings


# ─────────────────────────────────────────────────────────────
# 시계 / 캐시
# ─────────────────────────────────────────────────────────────
class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return MemoryTrackingCache(clock=clock)


# ─────────────────────────────────────────────────────────────
# 가짜 어댑터 / 가짜 HTTP 응답
# ─────────────────────────────────────────────────────────────
class FakeAdapter:
    """register/fetch 응답을 미리 정해두고 호출 기록을 남긴다."""

    code = "aftership"

    def __init__(self, register=None, fetch=None):
        self.register_result = register
        self.fetch_result = fetch
        self.calls = []

    def register(self, tracking_number, slug=None):
        self.calls.append(("register", tracking_number, slug))
        if isinstance(self.register_result, Exception):
            raise self.register_result
        return self.register_result

    def fetch(self, tracking_number, slug=None):
        self.calls.append(("fetch", tracking_number, slug))
        if isinstance(self.fetch_result, Exception):
            raise self.fetch_result
        return self.fetch_result


@pytest.fixture
def fake_adapter_factory():
    return FakeAdapter


def aftership_envelope(tracking_number="JNE0001", slug="jne", checkpoints=None, **extra):
    tracking = {
        "tracking_number": tracking_number,
        "slug": slug,
        "title": extra.pop("title", "Paket Toko"),
        "checkpoints": checkpoints if checkpoints is not None else [],
        **extra,
    }
    return {"meta": {"code": 200}, "data": {"tracking": tracking}}


@pytest.fixture
def make_envelope():
    return aftership_envelope


@pytest.fixture
def ok_result():
    def _make(body, status_code=200):
        return UpstreamResult(success=True, status_code=status_code, body=body)

    return _make


@pytest.fixture
def fail_result():
    def _make(status_code=409, body=None):
        body = body if body is not None else {"meta": {"code": 4003, "message": "Tracking already exists."}}
        return UpstreamResult(success=False, status_code=status_code, body=body)

    return _make


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def fake_response():
    return FakeResponse
