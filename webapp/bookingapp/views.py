# webapp/bookingapp/views.py
"""
Представления (views) приложения `bookingapp`.

- index — лендинг; вошедших пользователей перенаправляет по роли;
- auth_page / sign_out — вход, регистрация, выход;
- admin_* — дашборд администратора и его действия (POST + redirect);
- user_* — дашборд пользователя и создание заявки;
- realtime_stream — SSE-стрим изменений коллекции (events / profiles).

Состояние экрана передаётся через query-параметры:
  ?month=ГГГГ-ММ-ДД — курсор месяца календаря;
  ?date=ГГГГ-ММ-ДД  — клик по дню (открыть форму нового события);
  ?event=<id>       — клик по событию (открыть карточку);
  ?tab=calendar|users|events — вкладка админского дашборда.
"""
from __future__ import annotations

import logging
import time
from datetime import date
from typing import Dict, Iterator, List, Optional
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.contrib.auth import login, logout
from django.contrib.auth.decorators import login_required
from django.contrib.auth.forms import AuthenticationForm
from django.db import connection
from django.http import Http404, HttpResponse, StreamingHttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from . import db, realtime
from .access import admin_required, approved_user_required
from .calendar_view import STATUS_LEGEND, WEEKDAY_LABELS, shift_month
from .dashboard import AdminDashboard, UserDashboard
from .forms import EventForm, SignUpForm
from .models import ApprovalStatus, UserRole
from .services import ensure_profile, get_role

logger = logging.getLogger(__name__)

ADMIN_TABS = ("calendar", "users", "events")


def _parse_day(value: Optional[str]) -> Optional[date]:
    """Дата из query-параметра; мусор молча игнорируем."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.debug("_parse_day: некорректная дата %r", value)
        return None


def _notifier(request):
    """notify(level, title, message) -> django.contrib.messages."""
    def _notify(level: str, title: str, message: str) -> None:
        add = messages.error if level == "error" else messages.success
        add(request, f"{title}: {message}")
    return _notify


def _dashboard_url(name: str, request, **params) -> str:
    month = request.POST.get("month") or request.GET.get("month")
    query = {k: v for k, v in {"month": month, **params}.items() if v}
    url = reverse(name)
    if query:
        url += "?" + urlencode(query)
    return url


def _calendar_context(dash, url_name: str) -> Dict:
    current = dash.calendar.current_month
    return {
        "calendar": dash.calendar,
        "days": dash.calendar.days,
        "weekday_labels": WEEKDAY_LABELS,
        "legend": STATUS_LEGEND,
        "month_param": current.isoformat(),
        "prev_month": shift_month(current, -1).isoformat(),
        "next_month": shift_month(current, 1).isoformat(),
        "dashboard_url": reverse(url_name),
    }


def _form_errors(form) -> str:
    parts: List[str] = []
    for field, errors in form.errors.items():
        label = "" if field == "__all__" else f"{field}: "
        parts.append(label + " ".join(errors))
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Лендинг и аутентификация
# ---------------------------------------------------------------------------

def index(request) -> HttpResponse:
    """Лендинг. Вошедших сразу отправляем на дашборд по роли."""
    if request.user.is_authenticated:
        if get_role(request.user) == UserRole.Role.ADMIN:
            return redirect("admin_dashboard")
        return redirect("user_dashboard")
    return render(request, "bookingapp/index.html")


def auth_page(request) -> HttpResponse:
    """
    Вход и регистрация на одной странице.

    POST action=signin — вход; action=signup — регистрация (профиль pending).
    """
    signin_form = AuthenticationForm(request)
    signup_form = SignUpForm()

    if request.method == "POST":
        action = request.POST.get("action")
        if action == "signin":
            signin_form = AuthenticationForm(request, data=request.POST)
            if signin_form.is_valid():
                login(request, signin_form.get_user())
                logger.info("auth: signin user_id=%s", signin_form.get_user().pk)
                return redirect("index")
        elif action == "signup":
            signup_form = SignUpForm(request.POST)
            if signup_form.is_valid():
                user = signup_form.save(commit=False)
                user.email = signup_form.cleaned_data["email"]
                user.save()
                ensure_profile(user, full_name=signup_form.cleaned_data.get("full_name", ""))
                login(request, user)
                logger.info("auth: signup user_id=%s", user.pk)
                messages.success(request, "Success: Account created. Waiting for admin approval.")
                return redirect("index")

    return render(
        request,
        "bookingapp/auth.html",
        {"signin_form": signin_form, "signup_form": signup_form},
    )


def sign_out(request) -> HttpResponse:
    logout(request)
    return redirect("auth")


# ---------------------------------------------------------------------------
# Дашборд администратора
# ---------------------------------------------------------------------------

@require_GET
@admin_required
def admin_dashboard(request) -> HttpResponse:
    tab = request.GET.get("tab") if request.GET.get("tab") in ADMIN_TABS else "calendar"
    dash = AdminDashboard(
        request.user,
        notify=_notifier(request),
        current_month=_parse_day(request.GET.get("month")),
        today=timezone.localdate(),
    )
    with dash:
        clicked_day = _parse_day(request.GET.get("date"))
        if clicked_day:
            dash.calendar.click_date(clicked_day)
        event_id = request.GET.get("event")
        if event_id:
            selected = next((ev for ev in dash.events if str(ev.pk) == event_id), None)
            if selected is not None:
                dash.calendar.click_event(selected)

        context = {
            "dash": dash,
            "tab": tab,
            "event_form": EventForm(initial={k: v for k, v in dash.form.items() if v}),
            **_calendar_context(dash, "admin_dashboard"),
        }
        return render(request, "bookingapp/admin_dashboard.html", context)


@require_POST
@admin_required
def admin_create_event(request) -> HttpResponse:
    dash = AdminDashboard(request.user, notify=_notifier(request), today=timezone.localdate())
    form = EventForm(request.POST)
    if form.is_valid():
        dash.handle_create_event(form.cleaned_data)
    else:
        dash.notify("error", "Error", _form_errors(form))
    return redirect(_dashboard_url("admin_dashboard", request))


@require_POST
@admin_required
def admin_event_status(request, pk: int, status: str) -> HttpResponse:
    if status not in (ApprovalStatus.APPROVED, ApprovalStatus.REJECTED):
        raise Http404("unknown status")
    dash = AdminDashboard(request.user, notify=_notifier(request), today=timezone.localdate())
    dash.handle_event_status_update(pk, status)
    return redirect(_dashboard_url("admin_dashboard", request, tab=request.POST.get("tab")))


@require_POST
@admin_required
def admin_event_delete(request, pk: int) -> HttpResponse:
    dash = AdminDashboard(request.user, notify=_notifier(request), today=timezone.localdate())
    dash.handle_delete_event(pk)
    return redirect(_dashboard_url("admin_dashboard", request, tab=request.POST.get("tab")))


@require_POST
@admin_required
def admin_user_decision(request, pk: int, decision: str) -> HttpResponse:
    dash = AdminDashboard(request.user, notify=_notifier(request), today=timezone.localdate())
    if decision == "approve":
        dash.handle_approve_user(pk)
    elif decision == "reject":
        dash.handle_reject_user(pk)
    else:
        raise Http404("unknown decision")
    return redirect(_dashboard_url("admin_dashboard", request, tab="users"))


# ---------------------------------------------------------------------------
# Дашборд пользователя
# ---------------------------------------------------------------------------

@require_GET
@approved_user_required
def user_dashboard(request) -> HttpResponse:
    dash = UserDashboard(
        request.user,
        notify=_notifier(request),
        current_month=_parse_day(request.GET.get("month")),
        today=timezone.localdate(),
    )
    with dash:
        clicked_day = _parse_day(request.GET.get("date"))
        if clicked_day:
            dash.calendar.click_date(clicked_day)
        context = {
            "dash": dash,
            "event_form": EventForm(initial={k: v for k, v in dash.form.items() if v}),
            **_calendar_context(dash, "user_dashboard"),
        }
        return render(request, "bookingapp/user_dashboard.html", context)


@require_POST
@approved_user_required
def user_create_request(request) -> HttpResponse:
    dash = UserDashboard(request.user, notify=_notifier(request), today=timezone.localdate())
    form = EventForm(request.POST)
    if form.is_valid():
        dash.handle_create_request(form.cleaned_data)
    else:
        dash.notify("error", "Error", _form_errors(form))
    return redirect(_dashboard_url("user_dashboard", request))


# ---------------------------------------------------------------------------
# Realtime: SSE-стрим изменений
# ---------------------------------------------------------------------------

def _sse(channel_name: str) -> str:
    return f"event: change\ndata: {channel_name}\n\n"


def _stream_pg(names: List[str], poll: float, deadline: float) -> Iterator[str]:
    """PostgreSQL: LISTEN на отдельном соединении psycopg2."""
    conn = db.get_connection()
    try:
        db.listen(conn, names)
        yield ": connected\n\n"
        while time.monotonic() < deadline:
            received = db.wait_for_notifications(conn, poll)
            for name in dict.fromkeys(received):
                yield _sse(name)
            if not received:
                yield ": keepalive\n\n"
    finally:
        conn.close()


def _stream_local(names: List[str], poll: float, deadline: float) -> Iterator[str]:
    """Прочие БД: сравниваем версии каналов внутри процесса."""
    seen = {name: realtime.channel(name).version for name in names}
    yield ": connected\n\n"
    while time.monotonic() < deadline:
        time.sleep(poll)
        changed = False
        for name in names:
            version = realtime.channel(name).version
            if version != seen[name]:
                seen[name] = version
                changed = True
                yield _sse(name)
        if not changed:
            yield ": keepalive\n\n"


@require_GET
@login_required
def realtime_stream(request, collection: str) -> StreamingHttpResponse:
    """
    SSE: шлёт `event: change` при изменении коллекции; страница перечитывает данные.

    Стрим живёт не дольше BOOKING_REALTIME_MAX_SECONDS, после чего браузер
    (EventSource) переподключается сам.
    """
    allowed = {realtime.EVENTS}
    if get_role(request.user) == UserRole.Role.ADMIN:
        allowed.add(realtime.PROFILES)
    if collection not in allowed:
        raise Http404("unknown collection")

    poll = float(settings.BOOKING_REALTIME_POLL_SECONDS)
    deadline = time.monotonic() + float(settings.BOOKING_REALTIME_MAX_SECONDS)
    if connection.vendor == "postgresql":
        stream = _stream_pg([collection], poll, deadline)
    else:
        stream = _stream_local([collection], poll, deadline)

    logger.info("realtime_stream: user_id=%s collection=%s", request.user.pk, collection)
    resp = StreamingHttpResponse(stream, content_type="text/event-stream")
    resp["Cache-Control"] = "no-cache"
    resp["X-Accel-Buffering"] = "no"
    return resp
