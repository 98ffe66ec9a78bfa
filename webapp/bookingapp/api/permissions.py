"""
permissions.py
==============

Кастомные права доступа для API.
"""

from __future__ import annotations

import logging

from rest_framework import permissions
from rest_framework.request import Request

from bookingapp.models import Profile, UserRole
from bookingapp.services import get_role

logger = logging.getLogger(__name__)


class IsBookingAdmin(permissions.BasePermission):
    """Разрешение: у пользователя есть роль `admin` (таблица user_roles)."""

    def has_permission(self, request: Request, view) -> bool:
        allowed = get_role(request.user) == UserRole.Role.ADMIN
        if not allowed:
            logger.debug("IsBookingAdmin: отказ user=%s", getattr(request.user, "pk", None))
        return allowed


class IsApprovedUser(permissions.BasePermission):
    """
    Разрешение: вошедший пользователь с одобренным профилем (или администратор).

    Если всё в порядке — кладём роль в request.booking_role, чтобы вьюхи забрали.
    """

    def has_permission(self, request: Request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        role = get_role(user)
        setattr(request, "booking_role", role)
        if role == UserRole.Role.ADMIN:
            return True
        return Profile.objects.filter(user=user, approval_status="approved").exists()
