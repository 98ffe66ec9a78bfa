"""
views.py (API)
==============

DRF-представления:
- EventViewSet: события (список с фильтрами, создание, смена статуса, удаление)
- ProfileViewSet: профили пользователей + approve/reject (только админы)
- CalendarMonthView: сетка месяца с раскладкой событий по дням
- MyRoleView: роль текущего пользователя (для редиректа на нужный дашборд)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List

from django.utils import timezone
from rest_framework import mixins, status as http_status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookingapp import services
from bookingapp.calendar_view import build_month_grid
from bookingapp.models import ApprovalStatus, Event, Profile, UserRole
from bookingapp.services import BackendError, NotFoundError
from .permissions import IsApprovedUser, IsBookingAdmin
from .serializers import (
    DayCellSerializer,
    EventSerializer,
    EventStatusSerializer,
    ProfileSerializer,
)

logger = logging.getLogger(__name__)


def _backend_failed(exc: BackendError) -> ValidationError:
    """BackendError -> HTTP 400 {"detail": "..."}."""
    return ValidationError({"detail": exc.message})


def _is_admin(request: Request) -> bool:
    return getattr(request, "booking_role", None) == UserRole.Role.ADMIN


# -------- События --------

class EventViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    /api/events/ — события.

    GET    ?status=…&requested_by=…&ordering=event_date|-created_at|…
    POST   — создать (администратор → approved, пользователь → pending)
    PATCH  /api/events/<id>/ {"status": "approved"|"rejected"} — только админ
    DELETE /api/events/<id>/ — только админ

    Пользователь видит одобренные события и свои заявки; админ — всё.
    """

    serializer_class = EventSerializer
    permission_classes = [IsApprovedUser]

    def get_permissions(self):
        if self.action in ("partial_update", "destroy"):
            return [IsApprovedUser(), IsBookingAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        qs = Event.objects.all()
        if not _is_admin(self.request):
            qs = qs.filter(status=ApprovalStatus.APPROVED) | qs.filter(requested_by=self.request.user)
        return qs.order_by("event_date")

    def list(self, request: Request, *args, **kwargs) -> Response:
        params = request.query_params
        requested_by = params.get("requested_by")
        if requested_by is not None and not requested_by.isdigit():
            raise ValidationError({"requested_by": "must be a user id"})
        try:
            events: List[Event] = services.fetch_events(
                status=params.get("status") or None,
                requested_by=int(requested_by) if requested_by else None,
                order_by=params.get("ordering") or "event_date",
            )
        except BackendError as exc:
            raise _backend_failed(exc) from exc

        if not _is_admin(request):
            events = [
                ev for ev in events
                if ev.status == ApprovalStatus.APPROVED or ev.requested_by_id == request.user.pk
            ]
        return Response(self.get_serializer(events, many=True).data)

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        status = ApprovalStatus.APPROVED if _is_admin(request) else ApprovalStatus.PENDING
        try:
            event = services.create_event(request.user, serializer.validated_data, status)
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(self.get_serializer(event).data, status=http_status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk=None) -> Response:
        payload = EventStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        try:
            event = services.update_event_status(pk, payload.validated_data["status"])
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(self.get_serializer(event).data)

    def destroy(self, request: Request, pk=None) -> Response:
        try:
            services.delete_event(pk)
        except NotFoundError as exc:
            raise NotFound(exc.message) from exc
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(status=http_status.HTTP_204_NO_CONTENT)


# -------- Профили (только админы) --------

class ProfileViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """/api/profiles/ — профили, новые сверху; approve/reject — POST-действия."""

    serializer_class = ProfileSerializer
    permission_classes = [IsApprovedUser, IsBookingAdmin]
    queryset = Profile.objects.order_by("-created_at")

    def list(self, request: Request, *args, **kwargs) -> Response:
        try:
            profiles = services.fetch_profiles()
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(self.get_serializer(profiles, many=True).data)

    @action(detail=True, methods=["post"])
    def approve(self, request: Request, pk=None) -> Response:
        try:
            profile = services.approve_user(pk)
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(self.get_serializer(profile).data)

    @action(detail=True, methods=["post"])
    def reject(self, request: Request, pk=None) -> Response:
        try:
            profile = services.reject_user(pk)
        except BackendError as exc:
            raise _backend_failed(exc) from exc
        return Response(self.get_serializer(profile).data)


# -------- Календарь месяца --------

class CalendarMonthView(APIView):
    """
    /api/calendar/?month=ГГГГ-ММ-ДД — сетка месяца.

    Админ видит все события, пользователь — только одобренные
    (как в календаре на дашборде).
    """

    permission_classes = [IsApprovedUser]

    def get(self, request: Request) -> Response:
        raw = request.query_params.get("month")
        today = timezone.localdate()
        try:
            reference = date.fromisoformat(raw) if raw else today
        except ValueError as exc:
            raise ValidationError({"month": "expected YYYY-MM-DD"}) from exc

        try:
            events = services.fetch_events(
                status=None if _is_admin(request) else ApprovalStatus.APPROVED,
                order_by="event_date",
            )
        except BackendError as exc:
            raise _backend_failed(exc) from exc

        cells = build_month_grid(reference, events, today=today)
        return Response({
            "month": reference.replace(day=1).isoformat(),
            "title": reference.strftime("%B %Y"),
            "days": DayCellSerializer(cells, many=True).data,
        })


# -------- Роль текущего пользователя --------

class MyRoleView(APIView):
    """/api/me/role/ — {"role": "admin" | "user" | null}."""

    def get(self, request: Request) -> Response:
        return Response({"role": services.get_role(request.user)})
