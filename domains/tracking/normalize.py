# domains/tracking/normalize.py
"""
제공자 원본 payload → 내부 공통 스키마 변환.

필드 후보 표는 루프 밖에 두고, 제공자 스키마가 바뀌면 표만 고친다.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .exceptions import UnexpectedPayloadShape

# ──────────────────────────────────────────────────────────────────────────────
# 체크포인트 필드 후보 (앞쪽 우선)
# ──────────────────────────────────────────────────────────────────────────────
CHECKPOINT_FIELDS: Dict[str, Tuple[Sequence[str], Any]] = {
    "time": (
        ("checkpoint_time", "created_at", "updated_at", "occurred_at", "time", "checkpoint_utc_time"),
        None,
    ),
    "status": (
        ("message", "tag", "description", "status", "checkpoint_status", "status_description"),
        "",
    ),
}

# 위치는 첫 값이 아니라 존재하는 값 전부를 순서대로 이어 붙인다
LOCATION_PARTS: Sequence[str] = ("city", "state", "country_name", "location", "address")
LOCATION_SEPARATOR = ", "


def _first_present(record: Mapping[str, Any], candidates: Sequence[str], default: Any = None) -> Any:
    for name in candidates:
        value = record.get(name)
        if value:
            return value
    return default


def normalize_checkpoint(record: Mapping[str, Any]) -> Dict[str, Any]:
    """임의 형태의 체크포인트 → {time, status, location}"""
    out: Dict[str, Any] = {}
    for target, (candidates, default) in CHECKPOINT_FIELDS.items():
        out[target] = _first_present(record, candidates, default)
    parts = [str(record[name]) for name in LOCATION_PARTS if record.get(name)]
    out["location"] = LOCATION_SEPARATOR.join(parts)
    return out


def extract_checkpoints(tracking: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    checkpoints 배열 우선, 없으면 단일 checkpoint 객체를 1건짜리 목록으로.
    dict가 아닌 항목은 건너뛴다.
    """
    raw = tracking.get("checkpoints")
    if not isinstance(raw, list):
        single = tracking.get("checkpoint")
        raw = [single] if single else []
    return [normalize_checkpoint(cp) for cp in raw if isinstance(cp, Mapping)]


# ──────────────────────────────────────────────────────────────────────────────
# 응답 envelope 매처 (순서대로 시도)
# ──────────────────────────────────────────────────────────────────────────────
def _nested_data_tracking(body: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    data = body.get("data")
    if isinstance(data, Mapping):
        tracking = data.get("tracking")
        if isinstance(tracking, Mapping):
            return tracking
    return None


def _top_level_tracking(body: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    tracking = body.get("tracking")
    if isinstance(tracking, Mapping):
        return tracking
    return None


ENVELOPE_MATCHERS: Sequence[Tuple[str, Callable[[Mapping[str, Any]], Optional[Mapping[str, Any]]]]] = (
    ("data.tracking", _nested_data_tracking),
    ("tracking", _top_level_tracking),
)


def extract_tracking(body: Any) -> Mapping[str, Any]:
    """알려진 envelope 중 처음 맞는 것에서 tracking 객체를 꺼낸다."""
    if isinstance(body, Mapping):
        for _name, matcher in ENVELOPE_MATCHERS:
            tracking = matcher(body)
            if tracking is not None:
                return tracking
    raise UnexpectedPayloadShape("tracking object not found in provider payload", raw=body)


def build_tracking(
    tracking: Mapping[str, Any], tracking_number: str, slug: Optional[str] = None
) -> Dict[str, Any]:
    return {
        "tracking_number": tracking.get("tracking_number") or tracking_number,
        "slug": tracking.get("slug") or slug or None,
        "title": tracking.get("title") or tracking.get("tag") or None,
        "checkpoints": extract_checkpoints(tracking),
    }
