# domains/tracking/demo.py
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

DEMO_PROVIDER = "demo"
DEMO_TITLE = "Demo tracking"

# 실제 제공자 미설정 시에만 쓰는 고정 데이터셋 (운송장 → 체크포인트 순서 고정)
DEMO_TRACKINGS: Dict[str, List[Dict[str, Any]]] = {
    "ANH1234567890": [
        {"time": "2026-02-01 09:12", "status": "Diterima di gudang asal - Jakarta", "location": "Jakarta, ID"},
        {"time": "2026-02-01 15:05", "status": "Berangkat ke depo regional", "location": "Jakarta, ID"},
        {"time": "2026-02-02 08:25", "status": "Dalam pengiriman - Dalam kota", "location": "Jakarta, ID"},
    ],
}

NOT_ENABLED_MESSAGE = (
    "Pelacakan real-time belum diaktifkan. Set TRACKING_PROVIDER=aftership and "
    "AFTERSHIP_API_KEY di environment untuk mengaktifkan."
)


def demo_payload(tracking_number: str) -> Optional[Dict[str, Any]]:
    """데모 데이터에 정확히 일치하는 운송장이 있으면 응답 payload, 없으면 None"""
    checkpoints = DEMO_TRACKINGS.get(tracking_number)
    if checkpoints is None:
        return None
    return {
        "ok": True,
        "provider": DEMO_PROVIDER,
        "demo_mode": True,
        "tracking": {
            "tracking_number": tracking_number,
            "slug": None,
            "title": DEMO_TITLE,
            "checkpoints": copy.deepcopy(checkpoints),
        },
    }


def demo_not_found_payload() -> Dict[str, Any]:
    return {"ok": False, "demo_mode": True, "message": NOT_ENABLED_MESSAGE}
