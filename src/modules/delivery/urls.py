"""Delivery URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import SimpleRouter

from modules.delivery.views import (
    DeliveryCostView,
    DeliveryEstimateView,
    DeliveryZoneViewSet,
)

router = SimpleRouter(trailing_slash=True)
router.register("delivery/zones", DeliveryZoneViewSet, basename="delivery-zone")

urlpatterns = [
    path("delivery/cost/", DeliveryCostView.as_view(), name="delivery-cost"),
    path(
        "delivery/estimate/<int:wilaya_id>/",
        DeliveryEstimateView.as_view(),
        name="delivery-estimate",
    ),
    *router.urls,
]
