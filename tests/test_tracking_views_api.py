import pytest

from domains.tracking.adapters import AfterShipAdapter, UpstreamResult

TRACK_URL = "/api/track"


# ─────────────────────────────────────────────────────────────
# 입력/메서드 검증
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize("method", ["get", "put", "patch", "delete", "options"])
def test_non_post_is_405(api_client, demo_settings, method):
    r = getattr(api_client, method)(TRACK_URL)
    assert r.status_code == 405
    assert r.json() == {"ok": False, "message": "Method Not Allowed"}


def test_missing_tracking_number_is_400(api_client, demo_settings):
    r = api_client.post(TRACK_URL, {"slug": "jne"}, format="json")
    assert r.status_code == 400
    assert r.json() == {"ok": False, "message": "trackingNumber is required"}


def test_malformed_json_is_400(api_client, demo_settings):
    r = api_client.post(TRACK_URL, data="{not json", content_type="application/json")
    assert r.status_code == 400
    assert r.json()["ok"] is False


def test_plain_text_body_keeps_error_envelope(api_client, demo_settings):
    r = api_client.post(TRACK_URL, data='{"trackingNumber":"ANH1234567890"}', content_type="text/plain")
    assert r.status_code == 415
    data = r.json()
    assert data["ok"] is False
    assert data["message"]
    assert "detail" not in data


def test_cors_preflight_is_answered_by_middleware(api_client, demo_settings):
    r = api_client.options(
        TRACK_URL,
        HTTP_ORIGIN="http://localhost:5173",
        HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
    )
    assert r.status_code == 200
    assert r["Access-Control-Allow-Origin"] == "http://localhost:5173"


def test_boolean_tracking_number_is_coerced(api_client, demo_settings):
    r = api_client.post(TRACK_URL, {"trackingNumber": True}, format="json")
    assert r.status_code == 200
    assert r.json()["ok"] is False  # "TRUE" 는 데모 데이터에 없음


@pytest.mark.parametrize("url", ["/api/track", "/api/track/", "/api/v1/track/"])
def test_all_routes_reach_the_handler(api_client, demo_settings, url):
    r = api_client.post(url, {"trackingNumber": "ANH1234567890"}, format="json")
    assert r.status_code == 200
    assert r.json()["provider"] == "demo"


# ─────────────────────────────────────────────────────────────
# 데모 모드
# ─────────────────────────────────────────────────────────────
def test_demo_known_number(api_client, demo_settings):
    r = api_client.post(TRACK_URL, {"trackingNumber": " anh1234567890 "}, format="json")
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    assert data["provider"] == "demo"
    assert data["demo_mode"] is True
    assert data["tracking"]["tracking_number"] == "ANH1234567890"
    assert len(data["tracking"]["checkpoints"]) == 3
    assert data["tracking"]["checkpoints"][0]["status"] == "Diterima di gudang asal - Jakarta"


def test_demo_second_call_is_cached(api_client, demo_settings):
    first = api_client.post(TRACK_URL, {"trackingNumber": "ANH1234567890"}, format="json").json()
    second = api_client.post(TRACK_URL, {"tracking_number": "anh1234567890", "courier": "auto"}, format="json").json()
    assert "cached" not in first
    assert second["cached"] is True
    assert second["tracking"] == first["tracking"]


def test_demo_unknown_number(api_client, demo_settings):
    r = api_client.post(TRACK_URL, {"trackingNumber": "UNKNOWN999"}, format="json")
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is False
    assert data["demo_mode"] is True
    assert "AFTERSHIP_API_KEY" in data["message"]
    assert "tracking" not in data


# ─────────────────────────────────────────────────────────────
# AfterShip 연동 (어댑터 가짜)
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def upstream(monkeypatch):
    """AfterShipAdapter.register/fetch 를 가짜로 교체하고 호출을 기록"""
    state = {"register": None, "fetch": None, "calls": []}

    def fake_register(self, tracking_number, slug=None):
        state["calls"].append(("register", tracking_number, slug))
        return state["register"]

    def fake_fetch(self, tracking_number, slug=None):
        state["calls"].append(("fetch", tracking_number, slug))
        return state["fetch"]

    monkeypatch.setattr(AfterShipAdapter, "register", fake_register)
    monkeypatch.setattr(AfterShipAdapter, "fetch", fake_fetch)
    return state


def test_register_success(api_client, aftership_settings, upstream, make_envelope):
    body = make_envelope(
        "JNE0001",
        checkpoints=[{"checkpoint_time": "2026-02-01T09:12:00", "tag": "InTransit", "city": "Jakarta", "country_name": "Indonesia"}],
    )
    upstream["register"] = UpstreamResult(True, 201, body)

    r = api_client.post(TRACK_URL, {"trackingNumber": "jne0001", "slug": "JNE"}, format="json")

    assert r.status_code == 200
    assert r.json() == {
        "ok": True,
        "provider": "aftership",
        "tracking": {
            "tracking_number": "JNE0001",
            "slug": "jne",
            "title": "Paket Toko",
            "checkpoints": [{"time": "2026-02-01T09:12:00", "status": "InTransit", "location": "Jakarta, Indonesia"}],
        },
    }
    assert upstream["calls"] == [("register", "JNE0001", "jne")]


def test_register_conflict_then_fetch(api_client, aftership_settings, upstream, make_envelope):
    upstream["register"] = UpstreamResult(False, 409, {"meta": {"code": 4003}})
    upstream["fetch"] = UpstreamResult(True, 200, {"tracking": {"tracking_number": "JNE0002", "checkpoint": {"tag": "Delivered"}}})

    r = api_client.post(TRACK_URL, {"trackingNumber": "JNE0002"}, format="json")
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    assert data["tracking"]["slug"] is None
    assert data["tracking"]["checkpoints"] == [{"time": None, "status": "Delivered", "location": ""}]

    again = api_client.post(TRACK_URL, {"trackingNumber": "jne0002", "slug": "auto"}, format="json").json()
    assert again["cached"] is True
    assert again["tracking"] == data["tracking"]
    assert [c[0] for c in upstream["calls"]] == ["register", "fetch"]


def test_both_fail_is_502(api_client, aftership_settings, upstream):
    upstream["register"] = UpstreamResult(False, 409, {"meta": {"code": 4003}})
    upstream["fetch"] = UpstreamResult(False, 404, {"raw": "not found"})

    r = api_client.post(TRACK_URL, {"trackingNumber": "BAD1"}, format="json")
    assert r.status_code == 502
    data = r.json()
    assert data["ok"] is False
    assert data["create"]["status_code"] == 409
    assert data["get"]["body"] == {"raw": "not found"}


def test_unexpected_payload_is_200_with_raw(api_client, aftership_settings, upstream):
    upstream["register"] = UpstreamResult(True, 201, {"data": {}})

    r = api_client.post(TRACK_URL, {"trackingNumber": "ODD1"}, format="json")
    assert r.status_code == 200
    assert r.json() == {
        "ok": False,
        "message": "AfterShip returned unexpected payload on create",
        "raw": {"data": {}},
    }


def test_internal_error_is_500(api_client, aftership_settings, monkeypatch):
    def boom(self, tracking_number, slug=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(AfterShipAdapter, "register", boom)

    r = api_client.post(TRACK_URL, {"trackingNumber": "ERR1"}, format="json")
    assert r.status_code == 500
    data = r.json()
    assert data["ok"] is False
    assert "boom" in data["message"]


# ─────────────────────────────────────────────────────────────
# 부가 엔드포인트
# ─────────────────────────────────────────────────────────────
def test_healthz(api_client):
    r = api_client.get("/healthz/")
    assert r.status_code == 200
    assert r.json() == {"ok": True}


def test_openapi_schema_lists_track_endpoint(api_client):
    r = api_client.get("/api/schema/", HTTP_ACCEPT="application/vnd.oai.openapi+json")
    assert r.status_code == 200
    assert "/track" in r.content.decode()
