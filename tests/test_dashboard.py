# tests/test_dashboard.py
from __future__ import annotations

from datetime import date

import pytest
from django.db import transaction

from bookingapp import realtime, services
from bookingapp.dashboard import AdminDashboard, UserDashboard
from bookingapp.models import ApprovalStatus, Event
from bookingapp.services import BackendError

TODAY = date(2025, 3, 10)


def _fail(*args, **kwargs):
    raise BackendError("connection refused")


@pytest.mark.django_db
def test_admin_mount_fetches_and_subscribes(booking_admin, approved_user, pending_user, make_event):
    make_event(approved_user, event_date=date(2025, 3, 12), status=ApprovalStatus.APPROVED)
    make_event(approved_user, event_date=date(2025, 3, 14))

    events_ch = realtime.channel(realtime.EVENTS)
    before = events_ch.subscriber_count
    with AdminDashboard(booking_admin, today=TODAY) as dash:
        assert len(dash.events) == 2
        assert len(dash.users) == 3
        assert dash.stats == {"total_users": 3, "pending_requests": 1, "upcoming_events": 1}
        assert events_ch.subscriber_count == before + 1
    assert events_ch.subscriber_count == before


@pytest.mark.django_db
def test_realtime_notification_refetches(booking_admin, approved_user, make_event,
                                         django_capture_on_commit_callbacks):
    with AdminDashboard(booking_admin, today=TODAY) as dash:
        assert dash.events == []
        with django_capture_on_commit_callbacks(execute=True):
            make_event(approved_user, event_date=date(2025, 3, 20))
        assert len(dash.events) == 1
        # повтор уведомления ничего не ломает
        realtime.channel(realtime.EVENTS).notify()
        realtime.channel(realtime.EVENTS).notify()
        assert len(dash.events) == 1
        assert dash.calendar.events == dash.events


@pytest.mark.django_db
def test_rolled_back_insert_does_not_reach_dashboard(booking_admin, approved_user, make_event,
                                                     django_capture_on_commit_callbacks):
    with AdminDashboard(booking_admin, today=TODAY) as dash:
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    make_event(approved_user, title="phantom")
                    raise RuntimeError("rollback")
        assert Event.objects.count() == 0
        assert dash.events == []


@pytest.mark.django_db
def test_failed_fetch_keeps_state_and_notifies(booking_admin, approved_user, make_event,
                                               notifier, notifications, monkeypatch):
    make_event(approved_user)
    with AdminDashboard(booking_admin, notify=notifier, today=TODAY) as dash:
        snapshot = list(dash.events)
        monkeypatch.setattr(services, "fetch_events", _fail)
        dash.fetch_events()
        assert dash.events == snapshot
    assert notifications == [("error", "Error", "connection refused")]


@pytest.mark.django_db
def test_admin_moderation_flow(booking_admin, approved_user, pending_user, make_event,
                               notifier, notifications):
    event = make_event(approved_user)
    with AdminDashboard(booking_admin, notify=notifier, today=TODAY) as dash:
        dash.calendar.click_event(dash.events[0])
        assert dash.show_event_dialog and dash.selected_event == event

        dash.handle_event_status_update(event.pk, ApprovalStatus.APPROVED)
        assert not dash.show_event_dialog
        assert dash.events[0].status == ApprovalStatus.APPROVED

        # повторная модерация запрещена — состояние не меняется
        dash.handle_event_status_update(event.pk, ApprovalStatus.REJECTED)
        assert dash.events[0].status == ApprovalStatus.APPROVED

        dash.handle_approve_user(pending_user.pk)
        assert dash.stats["pending_requests"] == 0

        dash.handle_delete_event(event.pk)
        assert dash.events == []

    levels = [n[0] for n in notifications]
    assert levels == ["success", "error", "success", "success"]
    assert notifications[0][2] == "Event approved"
    assert notifications[2][2] == "User approved successfully"
    assert notifications[3][2] == "Event deleted"


@pytest.mark.django_db
def test_admin_date_click_prefills_and_creates_approved(booking_admin, notifier, notifications):
    with AdminDashboard(booking_admin, notify=notifier, today=TODAY,
                        current_month=date(2025, 3, 1)) as dash:
        dash.calendar.click_date(date(2025, 3, 21))
        assert dash.show_new_event_dialog
        assert dash.form["event_date"] == "2025-03-21"

        dash.form["title"] = "Board meeting"
        created = dash.handle_create_event()
        assert created.status == ApprovalStatus.APPROVED
        assert not dash.show_new_event_dialog
        assert dash.form["title"] == ""
        cell = next(c for c in dash.calendar.days if c.date == date(2025, 3, 21))
        assert [e.title for e in cell.events] == ["Board meeting"]
    assert notifications[-1] == ("success", "Success", "Event created successfully")


@pytest.mark.django_db
def test_user_dashboard_sees_only_approved_on_calendar(approved_user, booking_admin, make_event):
    make_event(booking_admin, title="public", status=ApprovalStatus.APPROVED)
    make_event(approved_user, title="mine")
    make_event(booking_admin, title="other pending")
    with UserDashboard(approved_user, today=TODAY) as dash:
        assert [e.title for e in dash.events] == ["public"]
        assert [e.title for e in dash.my_requests] == ["mine"]


@pytest.mark.django_db
def test_user_request_is_pending(approved_user, notifier, notifications):
    with UserDashboard(approved_user, notify=notifier, today=TODAY) as dash:
        dash.calendar.click_date(date(2025, 3, 5))
        assert dash.show_new_request_dialog
        event = dash.handle_create_request({**dash.form, "title": "Birthday"})
        assert event.status == ApprovalStatus.PENDING
        assert [e.pk for e in dash.my_requests] == [event.pk]
        # заявка не одобрена — в календаре её нет
        assert dash.events == []
    assert notifications == [
        ("success", "Success", "Booking request submitted! Waiting for admin approval."),
    ]


@pytest.mark.django_db
def test_user_event_click_is_ignored(approved_user, booking_admin, make_event):
    make_event(booking_admin, status=ApprovalStatus.APPROVED)
    with UserDashboard(approved_user, today=TODAY) as dash:
        dash.calendar.click_event(dash.events[0])
        assert not dash.show_new_request_dialog


@pytest.mark.django_db
def test_user_without_session_is_silent(notifier, notifications):
    with UserDashboard(None, notify=notifier, today=TODAY) as dash:
        assert dash.handle_create_request({"title": "x", "event_date": "2025-03-05"}) is None
        assert dash.my_requests == []
    assert notifications == []
    assert Event.objects.count() == 0


@pytest.mark.django_db
def test_user_create_failure_reports_error(approved_user, notifier, notifications):
    with UserDashboard(approved_user, notify=notifier, today=TODAY) as dash:
        dash.form = {**dash.form, "title": "No date"}
        assert dash.handle_create_request() is None
        assert dash.show_new_request_dialog is False
        assert dash.form["title"] == "No date"
    assert notifications[0][:2] == ("error", "Error")
