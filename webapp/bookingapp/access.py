"""
access.py
=========

Ограничение доступа к дашбордам.

- /admin/ — только пользователи с ролью `admin`;
- /user/  — любой вошедший пользователь с одобренным профилем
  (администратор тоже может открыть пользовательский календарь).

Роль и профиль читаются из БД на каждом запросе.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable

from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from .models import Profile, UserRole
from .services import get_role

logger = logging.getLogger(__name__)


def admin_required(view: Callable) -> Callable:
    """Вьюха только для администратора; остальных отправляем на главную."""

    @login_required
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        if get_role(request.user) != UserRole.Role.ADMIN:
            logger.warning("admin_required: отказ user_id=%s path=%s", request.user.pk, request.path)
            return redirect("index")
        return view(request, *args, **kwargs)

    return _wrapped


def approved_user_required(view: Callable) -> Callable:
    """Вьюха для одобренных пользователей; неодобренным — страница ожидания."""

    @login_required
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        if get_role(request.user) == UserRole.Role.ADMIN:
            return view(request, *args, **kwargs)
        profile = Profile.objects.filter(user=request.user).first()
        if profile is None or not profile.is_approved:
            status = profile.approval_status if profile else "pending"
            return render(request, "bookingapp/awaiting_approval.html", {"status": status}, status=403)
        return view(request, *args, **kwargs)

    return _wrapped
