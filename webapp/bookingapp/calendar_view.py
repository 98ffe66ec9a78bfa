"""
calendar_view.py
================

Чистая (без БД и без Django) логика календаря бронирований.

Отвечает за:
- построение сетки дней месяца (ровно с 1-го по последнее число, без
  «хвостов» соседних месяцев);
- раскладку событий по дням (сравнение только по календарной дате);
- политику отображения ячейки: не больше двух «чипов» и подпись «+N more»;
- отображение статуса события в цвет / вариант бейджа;
- маршрутизацию кликов (клик по дню / клик по событию внутри дня).

Порядок событий внутри дня — порядок входного списка. Дашборды сортируют
события только по дате, поэтому порядок внутри одного дня не определён
и зависит от того, что вернула БД.
"""

from __future__ import annotations

import calendar as std_calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Any, Callable, List, Optional, Sequence, Tuple

MAX_VISIBLE_EVENTS = 2

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

STATUS_APPROVED = "approved"
STATUS_PENDING = "pending"
STATUS_REJECTED = "rejected"

_STATUS_COLORS = {
    STATUS_APPROVED: "bg-approved",
    STATUS_PENDING: "bg-pending",
    STATUS_REJECTED: "bg-rejected",
}
NEUTRAL_COLOR = "bg-muted"

_BADGE_VARIANTS = {
    STATUS_APPROVED: "default",
    STATUS_PENDING: "secondary",
    STATUS_REJECTED: "destructive",
}
NEUTRAL_BADGE = "secondary"

# Легенда под календарём: (css-класс, подпись)
STATUS_LEGEND: Tuple[Tuple[str, str], ...] = (
    ("bg-approved", "Approved"),
    ("bg-pending", "Pending"),
    ("bg-rejected", "Rejected"),
)


# ---------------------------------------------------------------------------
# Статус -> представление
# ---------------------------------------------------------------------------

def status_color(status: Any) -> str:
    """
    CSS-класс «чипа» события по его статусу.

    Функция тотальная: None, пустая строка, неизвестный статус или вообще
    не строка дают нейтральный цвет, исключений нет.
    """
    if not isinstance(status, str):
        return NEUTRAL_COLOR
    return _STATUS_COLORS.get(status, NEUTRAL_COLOR)


def status_badge_variant(status: Any) -> str:
    """Вариант бейджа для списков заявок (default / secondary / destructive)."""
    if not isinstance(status, str):
        return NEUTRAL_BADGE
    return _BADGE_VARIANTS.get(status, NEUTRAL_BADGE)


def status_label(status: Any) -> str:
    """Человекочитаемая подпись статуса."""
    if isinstance(status, str) and status in _STATUS_COLORS:
        return status.capitalize()
    return "Unknown"


# ---------------------------------------------------------------------------
# Даты
# ---------------------------------------------------------------------------

def _as_date(value: Any) -> Optional[date]:
    """Привести event_date к date: date, datetime или ISO-строка 'ГГГГ-ММ-ДД...'."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _event_date_of(event: Any) -> Optional[date]:
    """event_date у модели/объекта или у словаря (ответ API)."""
    if isinstance(event, dict):
        return _as_date(event.get("event_date"))
    return _as_date(getattr(event, "event_date", None))


def month_bounds(reference: date) -> Tuple[date, date]:
    """Первый и последний день месяца, в который попадает reference."""
    last_day = std_calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


def month_days(reference: date) -> List[date]:
    """Все дни месяца по порядку, без повторов."""
    first, last = month_bounds(reference)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def shift_month(reference: date, months: int) -> date:
    """
    Сдвинуть дату на `months` календарных месяцев, сохранив число месяца.

    Если такого числа в целевом месяце нет (31 января + 1 месяц),
    берётся последний день целевого месяца. За пределами диапазона date
    результат прижимается к date.min / date.max.
    """
    index = reference.year * 12 + (reference.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if year < MINYEAR:
        return date.min
    if year > MAXYEAR:
        return date.max
    last_day = std_calendar.monthrange(year, month)[1]
    return date(year, month, min(reference.day, last_day))


# ---------------------------------------------------------------------------
# Раскладка событий по дням
# ---------------------------------------------------------------------------

def events_for_date(events: Sequence[Any], day: date) -> List[Any]:
    """
    События, у которых event_date совпадает с днём (время суток не учитывается).

    Порядок — как во входном списке.
    """
    target = _as_date(day)
    return [ev for ev in events if _event_date_of(ev) == target]


@dataclass(frozen=True)
class DayCell:
    """Ячейка календаря: дата + события этого дня + флаги отображения."""

    date: date
    events: Tuple[Any, ...] = field(default_factory=tuple)
    is_today: bool = False
    in_current_month: bool = True

    @property
    def visible_events(self) -> Tuple[Any, ...]:
        return self.events[:MAX_VISIBLE_EVENTS]

    @property
    def hidden_count(self) -> int:
        return max(len(self.events) - MAX_VISIBLE_EVENTS, 0)

    @property
    def overflow_label(self) -> str:
        return f"+{self.hidden_count} more" if self.hidden_count else ""


def build_month_grid(
    reference: date,
    events: Sequence[Any],
    today: Optional[date] = None,
) -> List[DayCell]:
    """
    Построить сетку месяца: по одной ячейке на каждый день месяца reference.

    :param reference: любая дата внутри нужного месяца
    :param events: события (модели Event или словари с ключом event_date)
    :param today: «сегодня» для подсветки; по умолчанию date.today()
    """
    today = today or date.today()
    return [
        DayCell(
            date=day,
            events=tuple(events_for_date(events, day)),
            is_today=(day == today),
            in_current_month=(day.month == reference.month and day.year == reference.year),
        )
        for day in month_days(reference)
    ]


# ---------------------------------------------------------------------------
# Компонент календаря с курсором месяца и обработчиками кликов
# ---------------------------------------------------------------------------

class ClickEvent:
    """Клик, всплывающий от «чипа» события к ячейке дня."""

    def __init__(self, day: date, event: Any = None) -> None:
        self.day = day
        self.event = event
        self.propagation_stopped = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


class MonthCalendar:
    """
    Календарь месяца: владеет только курсором месяца и двумя необязательными
    колбэками. Выбор, диалоги и запросы к БД живут в дашборде.
    """

    def __init__(
        self,
        events: Sequence[Any] = (),
        on_date_click: Optional[Callable[[date], None]] = None,
        on_event_click: Optional[Callable[[Any], None]] = None,
        current_month: Optional[date] = None,
        today: Optional[date] = None,
    ) -> None:
        self.events = list(events)
        self.on_date_click = on_date_click
        self.on_event_click = on_event_click
        self.today = today
        self.current_month = current_month or today or date.today()

    @property
    def title(self) -> str:
        return self.current_month.strftime("%B %Y")

    @property
    def days(self) -> List[DayCell]:
        return build_month_grid(self.current_month, self.events, today=self.today)

    def previous_month(self) -> date:
        self.current_month = shift_month(self.current_month, -1)
        return self.current_month

    def next_month(self) -> date:
        self.current_month = shift_month(self.current_month, 1)
        return self.current_month

    def dispatch_click(self, day: date, event: Any = None) -> ClickEvent:
        """
        Обработать клик по ячейке дня; если event задан — клик пришёл с «чипа».

        Обработчик «чипа» останавливает всплытие, поэтому обработчик дня
        в этом случае не вызывается.
        """
        click = ClickEvent(day, event)
        if event is not None:
            click.stop_propagation()
            if self.on_event_click is not None:
                self.on_event_click(event)
        if not click.propagation_stopped and self.on_date_click is not None:
            self.on_date_click(day)
        return click

    def click_date(self, day: date) -> ClickEvent:
        return self.dispatch_click(day)

    def click_event(self, event: Any) -> ClickEvent:
        return self.dispatch_click(_event_date_of(event), event)


__all__ = [
    "MAX_VISIBLE_EVENTS",
    "WEEKDAY_LABELS",
    "STATUS_LEGEND",
    "status_color",
    "status_badge_variant",
    "status_label",
    "month_bounds",
    "month_days",
    "shift_month",
    "events_for_date",
    "DayCell",
    "build_month_grid",
    "ClickEvent",
    "MonthCalendar",
]
