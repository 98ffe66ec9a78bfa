# tests/test_views.py
from __future__ import annotations

import time
from datetime import date

import pytest
from django.contrib.messages import get_messages
from django.test import Client

from bookingapp import realtime, views
from bookingapp.models import ApprovalStatus, Event, Profile, UserRole


@pytest.mark.django_db
def test_landing_for_anonymous(client: Client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b"Sign In" in resp.content


@pytest.mark.django_db
def test_index_redirects_by_role(client: Client, booking_admin, approved_user):
    client.force_login(booking_admin)
    assert client.get("/").url == "/admin/"
    client.force_login(approved_user)
    assert client.get("/").url == "/user/"


@pytest.mark.django_db
def test_signup_creates_pending_profile(client: Client):
    resp = client.post("/auth/", {
        "action": "signup",
        "username": "dave",
        "email": "dave@example.com",
        "full_name": "Dave Example",
        "password1": "Very-strong-pass-42",
        "password2": "Very-strong-pass-42",
    })
    assert resp.status_code == 302
    profile = Profile.objects.get(user__username="dave")
    assert profile.approval_status == ApprovalStatus.PENDING
    assert profile.full_name == "Dave Example"
    assert profile.email == "dave@example.com"

    # пока профиль не одобрен — страница ожидания
    resp = client.get("/user/")
    assert resp.status_code == 403
    assert b"Waiting for approval" in resp.content


@pytest.mark.django_db
def test_signin_and_signout(client: Client, approved_user):
    resp = client.post("/auth/", {"action": "signin", "username": "alice", "password": "pass-12345-word"})
    assert resp.status_code == 302
    assert client.get("/user/").status_code == 200
    client.post("/auth/signout/")
    assert client.get("/user/").status_code == 302


@pytest.mark.django_db
def test_admin_dashboard_requires_admin_role(client: Client, approved_user):
    assert client.get("/admin/").status_code == 302  # не вошёл -> /auth/
    client.force_login(approved_user)
    resp = client.get("/admin/")
    assert resp.status_code == 302
    assert resp.url == "/"


@pytest.mark.django_db
def test_admin_calendar_renders_chips_and_overflow(client: Client, booking_admin, approved_user, make_event):
    make_event(approved_user, title="First", status=ApprovalStatus.APPROVED)
    make_event(approved_user, title="Second", status=ApprovalStatus.PENDING)
    make_event(approved_user, title="Third", status=ApprovalStatus.REJECTED)
    client.force_login(booking_admin)

    resp = client.get("/admin/", {"month": "2025-03-01"})
    assert resp.status_code == 200
    html = resp.content.decode()
    assert "March 2025" in html
    assert "+1 more" in html
    assert "chip bg-approved" in html and "chip bg-pending" in html
    assert "chip bg-rejected" not in html
    cell = next(c for c in resp.context["days"] if c.date == date(2025, 3, 5))
    assert [e.title for e in cell.visible_events] == ["First", "Second"]
    assert resp.context["prev_month"] == "2025-02-01"
    assert resp.context["next_month"] == "2025-04-01"


@pytest.mark.django_db
def test_month_cursor_at_date_range_ends(client: Client, booking_admin, approved_user):
    client.force_login(booking_admin)
    resp = client.get("/admin/", {"month": "9999-12-15"})
    assert resp.status_code == 200
    assert resp.context["next_month"] == "9999-12-31"

    client.force_login(approved_user)
    resp = client.get("/user/", {"month": "0001-01-10"})
    assert resp.status_code == 200
    assert resp.context["prev_month"] == "0001-01-01"


@pytest.mark.django_db
def test_admin_day_and_event_clicks(client: Client, booking_admin, approved_user, make_event):
    event = make_event(approved_user, title="Concert", description="Loud")
    client.force_login(booking_admin)

    resp = client.get("/admin/", {"month": "2025-03-01", "date": "2025-03-12"})
    assert resp.context["dash"].show_new_event_dialog
    assert b"Create New Event" in resp.content
    assert b'value="2025-03-12"' in resp.content

    resp = client.get("/admin/", {"month": "2025-03-01", "event": str(event.pk)})
    dash = resp.context["dash"]
    assert dash.show_event_dialog and not dash.show_new_event_dialog
    assert b"Loud" in resp.content


@pytest.mark.django_db
def test_admin_actions(client: Client, booking_admin, approved_user, pending_user, make_event):
    event = make_event(approved_user)
    client.force_login(booking_admin)

    resp = client.post(f"/admin/events/{event.pk}/approved/", {"month": "2025-03-01"})
    assert resp.status_code == 302
    assert resp.url == "/admin/?month=2025-03-01"
    event.refresh_from_db()
    assert event.status == ApprovalStatus.APPROVED

    resp = client.post(f"/admin/users/{pending_user.pk}/approve/")
    assert UserRole.objects.filter(user=pending_user, role="user").exists()
    msgs = [str(m) for m in get_messages(resp.wsgi_request)]
    assert "Success: User approved successfully" in msgs

    client.post("/admin/events/new/", {"title": "Gala", "event_date": "2025-03-22"})
    assert Event.objects.get(title="Gala").status == ApprovalStatus.APPROVED

    client.post(f"/admin/events/{event.pk}/delete/")
    assert not Event.objects.filter(pk=event.pk).exists()


@pytest.mark.django_db
def test_admin_failed_action_shows_error(client: Client, booking_admin, approved_user, make_event):
    event = make_event(approved_user, status=ApprovalStatus.REJECTED)
    client.force_login(booking_admin)
    resp = client.post(f"/admin/events/{event.pk}/approved/")
    msgs = [str(m) for m in get_messages(resp.wsgi_request)]
    assert msgs == ["Error: Cannot change event status from rejected to approved"]
    event.refresh_from_db()
    assert event.status == ApprovalStatus.REJECTED


@pytest.mark.django_db
def test_user_request_flow(client: Client, approved_user, booking_admin, make_event):
    make_event(booking_admin, title="Approved one", status=ApprovalStatus.APPROVED)
    make_event(booking_admin, title="Hidden pending")
    client.force_login(approved_user)

    resp = client.post("/user/requests/new/", {
        "title": "Team lunch",
        "description": "Room B",
        "event_date": "2025-03-07",
        "start_time": "12:00",
        "end_time": "13:00",
        "month": "2025-03-01",
    })
    assert resp.status_code == 302
    created = Event.objects.get(title="Team lunch")
    assert created.status == ApprovalStatus.PENDING
    assert created.requested_by == approved_user

    resp = client.get("/user/", {"month": "2025-03-01"})
    html = resp.content.decode()
    assert "Approved one" in html
    assert "Hidden pending" not in html
    assert "Team lunch" in html  # в списке «My Requests»


@pytest.mark.django_db
def test_user_request_form_errors(client: Client, approved_user):
    client.force_login(approved_user)
    resp = client.post("/user/requests/new/", {
        "title": "Backwards", "event_date": "2025-03-07", "start_time": "13:00", "end_time": "12:00",
    })
    msgs = [str(m) for m in get_messages(resp.wsgi_request)]
    assert msgs == ["Error: End time must be after start time."]
    assert not Event.objects.exists()


@pytest.mark.django_db
def test_realtime_stream_access(client: Client, approved_user, booking_admin):
    client.force_login(approved_user)
    assert client.get("/realtime/profiles/").status_code == 404
    resp = client.get("/realtime/events/")
    assert resp.status_code == 200
    assert resp["Content-Type"] == "text/event-stream"
    body = b"".join(resp.streaming_content)
    assert body.startswith(b": connected")

    client.force_login(booking_admin)
    assert client.get("/realtime/profiles/").status_code == 200


def test_local_stream_emits_change():
    stream = views._stream_local([realtime.EVENTS], 0, time.monotonic() + 5)
    assert next(stream) == ": connected\n\n"
    realtime.channel(realtime.EVENTS).notify()
    assert next(stream) == "event: change\ndata: events\n\n"
    assert next(stream) == ": keepalive\n\n"
    stream.close()
