from django.apps import AppConfig


class TrackingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "domains.tracking"  # 모듈 경로
    label = "tracking"
