from django.urls import path

from .views import TrackAPI

app_name = "tracking"

urlpatterns = [
    path("track/", TrackAPI.as_view(), name="track"),
]
