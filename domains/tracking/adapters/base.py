# domains/tracking/adapters/base.py
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class UpstreamResult:
    """
    제공자 호출 결과.
    body는 항상 dict: JSON 파싱 실패 시 {"raw": 원문 텍스트}
    """

    success: bool
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TrackingProviderAdapter:
    """
    운송장 조회 제공자 어댑터의 최소 공통 인터페이스
    """

    code = ""

    def register(self, tracking_number: str, slug: Optional[str] = None) -> UpstreamResult:
        """외부 서비스에 운송장을 등록(create)한다."""
        raise NotImplementedError

    def fetch(self, tracking_number: str, slug: Optional[str] = None) -> UpstreamResult:
        """이미 등록된 운송장 정보를 조회(get)한다."""
        raise NotImplementedError
