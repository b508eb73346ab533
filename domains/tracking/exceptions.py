# domains/tracking/exceptions.py
from __future__ import annotations

from typing import Any


class TrackingError(Exception):
    """운송장 조회 도메인 공통 예외"""

    pass


class UnexpectedPayloadShape(TrackingError):
    """제공자가 성공 응답을 줬지만 알려진 envelope 형태가 아닐 때"""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw
