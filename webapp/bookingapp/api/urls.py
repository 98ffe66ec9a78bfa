"""
urls.py (API)
=============

Маршрутизация DRF-эндпоинтов.
"""

from __future__ import annotations

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    CalendarMonthView,
    EventViewSet,
    MyRoleView,
    ProfileViewSet,
)

router = DefaultRouter()
router.register(r"events", EventViewSet, basename="events")
router.register(r"profiles", ProfileViewSet, basename="profiles")

urlpatterns = [
    # Сетка месяца: /api/calendar/?month=2025-03-01
    path("calendar/", CalendarMonthView.as_view(), name="calendar-month"),
    # Роль для редиректа: /api/me/role/
    path("me/role/", MyRoleView.as_view(), name="my-role"),
    # CRUD-эндпоинты:
    path("", include(router.urls)),
]
