# domains/tracking/adapters/__init__.py
from .aftership import AfterShipAdapter
from .base import TrackingProviderAdapter, UpstreamResult

# TRACKING_PROVIDER 값 → 어댑터
_ADAPTERS = {
    AfterShipAdapter.code: AfterShipAdapter,
}


def get_adapter(provider: str) -> TrackingProviderAdapter:
    """제공자 코드로 어댑터 생성. 모르는 코드는 LookupError."""
    cls = _ADAPTERS.get((provider or "").strip().lower())
    if cls is None:
        raise LookupError(f"No adapter registered for provider '{provider}'")
    return cls()


__all__ = ["AfterShipAdapter", "TrackingProviderAdapter", "UpstreamResult", "get_adapter"]
