from django.urls import path, include, re_path
from django.views.generic import RedirectView
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from domains.tracking.views import TrackAPI


def healthz(_):
    return JsonResponse({"ok": True})


urlpatterns = [
    # OpenAPI / Swagger
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),

    # 정적 사이트가 호출하는 경로: /api/track (슬래시 유무 모두, POST 리다이렉트 방지)
    re_path(r"^api/track/?$", TrackAPI.as_view(), name="track-root"),

    # API v1 엔드포인트
    path("api/v1/", include("api.v1.urls")),

    # 루트 → 문서
    path("", RedirectView.as_view(url="/api/docs/", permanent=False)),

    # 헬스체크
    path("healthz/", healthz),
]
