from __future__ import annotations

from rest_framework import serializers

from .services import TrackingQuery

TRACKING_NUMBER_REQUIRED = "trackingNumber is required"


def _first_text(attrs, *names) -> str:
    # 숫자/불리언 등 문자열이 아닌 값도 str() 로 받아들인다 (false/0/null 은 미입력)
    for name in names:
        value = attrs.get(name)
        if not value:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


# ---------------------------
# 입력용: 운송장 조회 요청
# trackingNumber / tracking_number, slug / courier 둘 다 받되
# validate에서 TrackingQuery 로 정규화
# ---------------------------
class TrackingQuerySerializer(serializers.Serializer):
    trackingNumber = serializers.JSONField(required=False, allow_null=True)
    tracking_number = serializers.JSONField(required=False, allow_null=True)
    slug = serializers.JSONField(required=False, allow_null=True)
    courier = serializers.JSONField(required=False, allow_null=True)

    def validate(self, attrs):
        tracking_number = _first_text(attrs, "trackingNumber", "tracking_number").upper()
        if not tracking_number:
            raise serializers.ValidationError({"trackingNumber": TRACKING_NUMBER_REQUIRED})

        # "auto" / 빈값 → 택배사 미지정
        slug = _first_text(attrs, "slug", "courier").lower()
        if slug == "auto":
            slug = ""

        return {"tracking_number": tracking_number, "slug": slug or None}

    def to_query(self) -> TrackingQuery:
        data = self.validated_data
        return TrackingQuery(tracking_number=data["tracking_number"], slug=data["slug"])


# ---------------------------
# 출력용 (문서화 전용)
# ---------------------------
class CheckpointSerializer(serializers.Serializer):
    time = serializers.CharField(allow_null=True)
    status = serializers.CharField(allow_blank=True)
    location = serializers.CharField(allow_blank=True)


class TrackingSerializer(serializers.Serializer):
    tracking_number = serializers.CharField()
    slug = serializers.CharField(allow_null=True)
    title = serializers.CharField(allow_null=True)
    checkpoints = CheckpointSerializer(many=True)


class TrackingResponseSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    provider = serializers.ChoiceField(choices=["aftership", "demo"])
    demo_mode = serializers.BooleanField(required=False)
    cached = serializers.BooleanField(required=False)
    tracking = TrackingSerializer()


class TrackingErrorSerializer(serializers.Serializer):
    ok = serializers.BooleanField(default=False)
    message = serializers.CharField()
    demo_mode = serializers.BooleanField(required=False)
    raw = serializers.JSONField(required=False)
    create = serializers.JSONField(required=False)
    get = serializers.JSONField(required=False)
