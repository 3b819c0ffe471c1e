"""Location catalog URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import SimpleRouter

from modules.locations.views import LocationSearchView, WilayaViewSet

router = SimpleRouter(trailing_slash=True)
router.register("wilayas", WilayaViewSet, basename="wilaya")

urlpatterns = [
    path("locations/search/", LocationSearchView.as_view(), name="location-search"),
    *router.urls,
]
