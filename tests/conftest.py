# tests/conftest.py
from __future__ import annotations

import os
import sys
from datetime import date, time
from typing import List, Tuple

import pytest

# --- Путь к Django-проекту и настройка DJANGO_SETTINGS_MODULE ---
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # корень репо
WEBAPP_DIR = os.path.join(REPO_ROOT, "webapp")
if WEBAPP_DIR not in sys.path:
    sys.path.insert(0, WEBAPP_DIR)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings_test")

import django  # noqa: E402
django.setup()  # noqa: E402

from django.contrib.auth.models import User  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

from bookingapp.models import ApprovalStatus, Event, Profile, UserRole  # noqa: E402


def _make_user(username: str, approval_status: str, role: str | None = None) -> User:
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="pass-12345-word",
    )
    Profile.objects.create(
        user=user,
        full_name=username.capitalize(),
        email=user.email,
        approval_status=approval_status,
    )
    if role:
        UserRole.objects.create(user=user, role=role)
    return user


@pytest.fixture
def booking_admin(db) -> User:
    """Администратор бронирований (роль admin, профиль одобрен)."""
    return _make_user("boss", ApprovalStatus.APPROVED, UserRole.Role.ADMIN)


@pytest.fixture
def approved_user(db) -> User:
    return _make_user("alice", ApprovalStatus.APPROVED, UserRole.Role.USER)


@pytest.fixture
def pending_user(db) -> User:
    return _make_user("bob", ApprovalStatus.PENDING)


@pytest.fixture
def make_event(db):
    """
    Фабрика событий в таблице events.
    """
    def _create(
        requested_by: User,
        title: str = "Test",
        event_date: date = date(2025, 3, 5),
        status: str = ApprovalStatus.PENDING,
        start_time: time | None = None,
        end_time: time | None = None,
        description: str = "",
    ) -> Event:
        return Event.objects.create(
            requested_by=requested_by,
            title=title,
            event_date=event_date,
            status=status,
            start_time=start_time,
            end_time=end_time,
            description=description,
        )
    return _create


@pytest.fixture
def notifications() -> List[Tuple[str, str, str]]:
    """Список, куда дашборд складывает уведомления (level, title, message)."""
    return []


@pytest.fixture
def notifier(notifications):
    def _notify(level: str, title: str, message: str) -> None:
        notifications.append((level, title, message))
    return _notify


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()
