# domains/tracking/adapters/aftership.py
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from django.conf import settings

from .base import TrackingProviderAdapter, UpstreamResult

logger = logging.getLogger(__name__)

AFTERSHIP_BASE = "https://api.aftership.com/v4"
DEFAULT_TIMEOUT = 10


class AfterShipAdapter(TrackingProviderAdapter):
    """
    AfterShip Trackings API 연동 어댑터
    - register: POST /trackings
    - fetch:    GET  /trackings/{slug}/{number} 또는 /trackings/{number}
    """

    code = "aftership"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else getattr(settings, "AFTERSHIP_API_KEY", "")
        self.base_url = (base_url or getattr(settings, "AFTERSHIP_BASE_URL", "") or AFTERSHIP_BASE).rstrip("/")
        self.timeout = timeout or getattr(settings, "TRACKING_UPSTREAM_TIMEOUT", DEFAULT_TIMEOUT)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "aftership-api-key": self.api_key or "",
        }

    @staticmethod
    def _result(resp: requests.Response) -> UpstreamResult:
        # JSON이 아니면 원문을 raw로 보존 (null을 넘기지 않음)
        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"raw": resp.text} if body is None else {"raw": body}
        return UpstreamResult(success=200 <= resp.status_code < 300, status_code=resp.status_code, body=body)

    def register(self, tracking_number: str, slug: Optional[str] = None) -> UpstreamResult:
        url = f"{self.base_url}/trackings"
        tracking: Dict[str, Any] = {"tracking_number": tracking_number}
        if slug:
            tracking["slug"] = slug

        logger.info("AfterShip create tracking: number=%s slug=%s", tracking_number, slug or "auto")
        resp = requests.post(url, headers=self._headers(), json={"tracking": tracking}, timeout=self.timeout)
        result = self._result(resp)
        if not result.success:
            logger.warning("AfterShip create non-2xx: %s %s", resp.status_code, resp.text[:500])
        return result

    def fetch(self, tracking_number: str, slug: Optional[str] = None) -> UpstreamResult:
        number = quote(tracking_number, safe="")
        if slug:
            url = f"{self.base_url}/trackings/{quote(slug, safe='')}/{number}"
        else:
            url = f"{self.base_url}/trackings/{number}"

        logger.info("AfterShip get tracking: %s", url)
        resp = requests.get(url, headers=self._headers(), timeout=self.timeout)
        result = self._result(resp)
        if not result.success:
            logger.warning("AfterShip get non-2xx: %s %s", resp.status_code, resp.text[:500])
        return result
