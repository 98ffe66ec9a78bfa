"""
dashboard.py
============

Контроллеры дашбордов (администратор / пользователь).

Всё изменяемое состояние экрана живёт здесь: загруженные списки,
счётчики, курсор месяца (через MonthCalendar), выбранное событие/дата,
флаги диалогов и поля формы. Расчёт календаря — в `calendar_view` (чистые
функции), запросы к БД — в `services`.

Жизненный цикл:
    with AdminDashboard(user, notify=...) as dash:   # mount(): fetch + подписки
        ...
    # unmount(): подписки гарантированно сняты

Любое уведомление канала вызывает полное перечитывание соответствующей
коллекции, поэтому повтор уведомления ничего не портит.

Ошибки: BackendError ловится здесь же, пользователю показывается уведомление
"Error" с текстом ошибки, локальное состояние не меняется.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from . import realtime, services
from .calendar_view import MonthCalendar
from .models import ApprovalStatus, Event, Profile
from .services import BackendError

logger = logging.getLogger(__name__)

# notify(level, title, message); level: "success" | "error"
Notifier = Callable[[str, str, str], None]


def empty_event_form() -> Dict[str, str]:
    return {"title": "", "description": "", "event_date": "", "start_time": "", "end_time": ""}


class BaseDashboard:
    """Общее: уведомления, подписки на каналы, календарь, форма нового события."""

    def __init__(
        self,
        user: Any,
        notify: Optional[Notifier] = None,
        current_month: Optional[date] = None,
        today: Optional[date] = None,
    ) -> None:
        self.user = user
        self._notify = notify
        self.today = today or date.today()
        self.events: List[Event] = []
        self.selected_date: Optional[date] = None
        self.form: Dict[str, str] = empty_event_form()
        self._subscriptions: List[realtime.Subscription] = []
        self.calendar = MonthCalendar(
            on_date_click=self.on_date_click,
            on_event_click=self.on_event_click,
            current_month=current_month,
            today=self.today,
        )

    # --- уведомления ---------------------------------------------------------

    def notify(self, level: str, title: str, message: str) -> None:
        log = logger.warning if level == "error" else logger.info
        log("%s: %s — %s", type(self).__name__, title, message)
        if self._notify is not None:
            self._notify(level, title, message)

    def _error(self, exc: BackendError) -> None:
        self.notify("error", "Error", exc.message)

    def _success(self, message: str) -> None:
        self.notify("success", "Success", message)

    # --- жизненный цикл ------------------------------------------------------

    def handlers(self) -> Dict[str, Callable[[Any], None]]:
        raise NotImplementedError

    def fetch_data(self) -> None:
        raise NotImplementedError

    def mount(self) -> "BaseDashboard":
        self.fetch_data()
        for name, handler in self.handlers().items():
            self._subscriptions.append(realtime.channel(name).subscribe(handler))
        logger.debug("%s: mounted, subscriptions=%s", type(self).__name__, len(self._subscriptions))
        return self

    def unmount(self) -> None:
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions = []
        logger.debug("%s: unmounted", type(self).__name__)

    def __enter__(self) -> "BaseDashboard":
        return self.mount()

    def __exit__(self, *exc_info: Any) -> None:
        self.unmount()

    # --- календарь -----------------------------------------------------------

    def _set_events(self, events: List[Event]) -> None:
        self.events = events
        self.calendar.events = events

    def on_date_click(self, day: date) -> None:
        raise NotImplementedError

    def on_event_click(self, event: Event) -> None:
        """По умолчанию клик по событию ничего не делает."""

    def reset_form(self) -> None:
        self.form = empty_event_form()

    def _prefill_date(self, day: date) -> None:
        self.selected_date = day
        self.form = {**self.form, "event_date": day.isoformat()}


# ---------------------------------------------------------------------------
# Администратор
# ---------------------------------------------------------------------------

class AdminDashboard(BaseDashboard):
    """Дашборд администратора: пользователи, все события, модерация."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.users: List[Profile] = []
        self.stats: Dict[str, int] = {"total_users": 0, "pending_requests": 0, "upcoming_events": 0}
        self.selected_event: Optional[Event] = None
        self.show_event_dialog = False
        self.show_new_event_dialog = False

    def handlers(self) -> Dict[str, Callable[[Any], None]]:
        return {
            realtime.EVENTS: lambda payload: self.fetch_events(),
            realtime.PROFILES: lambda payload: self.fetch_users(),
        }

    def fetch_data(self) -> None:
        self.fetch_users()
        self.fetch_events()

    def fetch_users(self) -> None:
        try:
            users = services.fetch_profiles()
        except BackendError as exc:
            self._error(exc)
            return
        self.users = users
        stats = services.dashboard_stats(users, [], self.today)
        self.stats.update(total_users=stats["total_users"], pending_requests=stats["pending_requests"])

    def fetch_events(self) -> None:
        try:
            events = services.fetch_events(order_by="event_date")
        except BackendError as exc:
            self._error(exc)
            return
        self._set_events(events)
        self.stats["upcoming_events"] = services.dashboard_stats([], events, self.today)["upcoming_events"]

    def handle_approve_user(self, user_id: Any) -> None:
        try:
            services.approve_user(user_id)
        except BackendError as exc:
            self._error(exc)
            return
        self._success("User approved successfully")
        self.fetch_users()

    def handle_reject_user(self, user_id: Any) -> None:
        try:
            services.reject_user(user_id)
        except BackendError as exc:
            self._error(exc)
            return
        self._success("User rejected")
        self.fetch_users()

    def handle_event_status_update(self, event_id: Any, status: str) -> None:
        try:
            services.update_event_status(event_id, status)
        except BackendError as exc:
            self._error(exc)
            return
        self._success(f"Event {status}")
        self.fetch_events()
        self.show_event_dialog = False

    def handle_create_event(self, data: Optional[Dict[str, Any]] = None) -> Optional[Event]:
        """Событие администратора сразу одобрено."""
        payload = data if data is not None else self.form
        try:
            event = services.create_event(self.user, payload, ApprovalStatus.APPROVED)
        except BackendError as exc:
            self._error(exc)
            return None
        if event is None:
            return None
        self._success("Event created successfully")
        self.show_new_event_dialog = False
        self.reset_form()
        self.fetch_events()
        return event

    def handle_delete_event(self, event_id: Any) -> None:
        try:
            services.delete_event(event_id)
        except BackendError as exc:
            self._error(exc)
            return
        self._success("Event deleted")
        self.fetch_events()
        self.show_event_dialog = False

    def on_date_click(self, day: date) -> None:
        self._prefill_date(day)
        self.show_new_event_dialog = True

    def on_event_click(self, event: Event) -> None:
        self.selected_event = event
        self.show_event_dialog = True


# ---------------------------------------------------------------------------
# Пользователь
# ---------------------------------------------------------------------------

class UserDashboard(BaseDashboard):
    """Дашборд пользователя: календарь одобренных событий и «мои заявки»."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.my_requests: List[Event] = []
        self.show_new_request_dialog = False

    def handlers(self) -> Dict[str, Callable[[Any], None]]:
        return {realtime.EVENTS: lambda payload: self.fetch_data()}

    def fetch_data(self) -> None:
        self.fetch_events()
        self.fetch_my_requests()

    def fetch_events(self) -> None:
        """В календаре пользователя — только одобренные события."""
        try:
            events = services.fetch_events(status=ApprovalStatus.APPROVED, order_by="event_date")
        except BackendError as exc:
            self._error(exc)
            return
        self._set_events(events)

    def fetch_my_requests(self) -> None:
        if self.user is None or not getattr(self.user, "is_authenticated", False):
            return
        try:
            requests = services.fetch_events(requested_by=self.user, order_by="-created_at")
        except BackendError as exc:
            self._error(exc)
            return
        self.my_requests = requests

    def handle_create_request(self, data: Optional[Dict[str, Any]] = None) -> Optional[Event]:
        payload = data if data is not None else self.form
        try:
            event = services.create_event(self.user, payload, ApprovalStatus.PENDING)
        except BackendError as exc:
            self._error(exc)
            return None
        if event is None:
            return None
        self._success("Booking request submitted! Waiting for admin approval.")
        self.show_new_request_dialog = False
        self.reset_form()
        self.fetch_my_requests()
        return event

    def on_date_click(self, day: date) -> None:
        self._prefill_date(day)
        self.show_new_request_dialog = True


__all__ = ["AdminDashboard", "UserDashboard", "empty_event_form"]
