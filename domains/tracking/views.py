# domains/tracking/views.py
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import exceptions, parsers, permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    TrackingErrorSerializer,
    TrackingQuerySerializer,
    TrackingResponseSerializer,
)
from .services import lookup_tracking

logger = logging.getLogger(__name__)


def _first_error_message(detail) -> str:
    # {"field": ["msg"]} / ["msg"] / "msg" → "msg"
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_error_message(value)
        return "Bad Request"
    if isinstance(detail, (list, tuple)):
        return _first_error_message(detail[0]) if detail else "Bad Request"
    return str(detail)


# --------------------------------------------------------------------
# POST /api/track
# body: {trackingNumber | tracking_number, slug? | courier?}
# 응답: {ok, provider, tracking{tracking_number, slug, title, checkpoints[]}}
# --------------------------------------------------------------------
class TrackAPI(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    parser_classes = [parsers.JSONParser]
    # OPTIONS 메타데이터 응답 없음 → 405 (CORS preflight 는 미들웨어가 처리)
    metadata_class = None

    @extend_schema(
        operation_id="TrackShipment",
        request=TrackingQuerySerializer,
        responses={
            200: TrackingResponseSerializer,
            400: TrackingErrorSerializer,
            405: TrackingErrorSerializer,
            415: TrackingErrorSerializer,
            500: TrackingErrorSerializer,
            502: TrackingErrorSerializer,
        },
    )
    def post(self, request):
        ser = TrackingQuerySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = lookup_tracking(ser.to_query())
        return Response(result.payload, status=result.status_code)

    def handle_exception(self, exc):
        # 공통 에러 envelope: {ok: false, message}
        if isinstance(exc, exceptions.MethodNotAllowed):
            return Response({"ok": False, "message": "Method Not Allowed"}, status=405)
        if isinstance(exc, exceptions.ValidationError):
            return Response({"ok": False, "message": _first_error_message(exc.detail)}, status=400)
        if isinstance(exc, exceptions.ParseError):
            return Response({"ok": False, "message": str(exc.detail)}, status=400)
        if isinstance(exc, exceptions.APIException):
            # 415/406/429 등 나머지 DRF 예외도 같은 envelope
            return Response({"ok": False, "message": _first_error_message(exc.detail)}, status=exc.status_code)
        logger.exception("예상치 못한 서버 오류: %s", exc)
        return Response({"ok": False, "message": f"Internal error: {exc}"}, status=500)
