# tests/test_models.py
from __future__ import annotations

from datetime import date, time

import pytest
from django.contrib.auth.models import User
from django.db import IntegrityError

from bookingapp.models import ApprovalStatus, Event, Profile, UserRole


@pytest.mark.django_db
def test_profile_defaults_to_pending():
    user = User.objects.create_user(username="carol", email="carol@example.com")
    profile = Profile.objects.create(user=user, email=user.email)
    profile.refresh_from_db()
    assert profile.approval_status == ApprovalStatus.PENDING
    assert profile.pk == user.pk
    assert profile.display_name == "No name"
    assert not profile.is_approved


@pytest.mark.django_db
def test_event_transitions(approved_user, make_event):
    event = make_event(approved_user)
    assert event.status == ApprovalStatus.PENDING
    assert event.can_transition_to(ApprovalStatus.APPROVED)
    assert event.can_transition_to(ApprovalStatus.REJECTED)
    assert not event.can_transition_to(ApprovalStatus.PENDING)

    event.status = ApprovalStatus.APPROVED
    event.save(update_fields=["status"])
    event.refresh_from_db()
    assert not event.can_transition_to(ApprovalStatus.REJECTED)


@pytest.mark.django_db
def test_event_time_range(approved_user, make_event):
    event = make_event(approved_user, start_time=time(9, 0), end_time=time(10, 30))
    assert event.time_range == "09:00 - 10:30"
    assert make_event(approved_user).time_range == " - "


@pytest.mark.django_db
def test_events_default_ordering_by_date(approved_user, make_event):
    make_event(approved_user, title="later", event_date=date(2025, 3, 20))
    make_event(approved_user, title="earlier", event_date=date(2025, 3, 2))
    assert [e.title for e in Event.objects.all()] == ["earlier", "later"]


@pytest.mark.django_db
def test_user_role_unique_per_user(approved_user):
    with pytest.raises(IntegrityError):
        UserRole.objects.create(user=approved_user, role=UserRole.Role.USER)
