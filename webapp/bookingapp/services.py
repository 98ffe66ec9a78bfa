"""
services.py
===========

Операции над хранилищем событий и профилей.

Три логические группы:

1) События (Event):
   - выборка с фильтрами по статусу / автору и сортировкой;
   - создание заявки (пользователь → pending, администратор → approved);
   - смена статуса (только pending → approved / rejected) и удаление.

2) Профили и роли (Profile, UserRole):
   - список профилей, одобрение (с выдачей роли `user`) и отклонение;
   - определение роли для редиректа на нужный дашборд.

3) Статистика для админского дашборда.

Любая ошибка БД или валидации превращается в BackendError с человекочитаемым
сообщением. Повторных попыток нет: вызывающий код показывает уведомление
и оставляет своё состояние как было.
"""

from __future__ import annotations

import logging
from datetime import date as date_cls
from typing import Any, Dict, List, Mapping, Optional, Sequence

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from .models import ApprovalStatus, Event, Profile, UserRole

logger = logging.getLogger(__name__)

EVENT_FIELDS = ("title", "description", "event_date", "start_time", "end_time")
EVENT_ORDERINGS = ("event_date", "-event_date", "created_at", "-created_at")


class BackendError(Exception):
    """Запрос к хранилищу не удался; str(exc) — сообщение для пользователя."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BackendError):
    """Строки с таким id нет."""


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(exc.messages)
    return str(exc) or exc.__class__.__name__


# ---------------------------------------------------------------------------
# СОБЫТИЯ
# ---------------------------------------------------------------------------

def fetch_events(
    status: Optional[str] = None,
    requested_by: Any = None,
    order_by: str = "event_date",
) -> List[Event]:
    """
    Прочитать события из таблицы events.

    :param status: оставить только события с этим статусом
    :param requested_by: пользователь или его id — только его заявки
    :param order_by: event_date / created_at (с «-» — по убыванию)
    :return: список Event; порядок внутри одной даты не определён
    """
    if order_by not in EVENT_ORDERINGS:
        raise BackendError(f"Unsupported ordering: {order_by}")
    try:
        qs = Event.objects.all()
        if status:
            qs = qs.filter(status=status)
        if requested_by is not None:
            qs = qs.filter(requested_by=requested_by)
        events = list(qs.order_by(order_by))
    except DatabaseError as exc:
        logger.exception("fetch_events: ошибка status=%s requested_by=%s", status, requested_by)
        raise BackendError(_error_message(exc)) from exc
    logger.info(
        "fetch_events: %s rows (status=%s requested_by=%s order=%s)",
        len(events), status, getattr(requested_by, "pk", requested_by), order_by,
    )
    return events


def create_event(user: Any, data: Mapping[str, Any], status: str) -> Optional[Event]:
    """
    Создать событие от имени user.

    Если пользователя нет (сессия отсутствует) — ничего не делаем и возвращаем None.

    :param user: автор заявки (django User) или None
    :param data: title, description, event_date, start_time, end_time
    :param status: pending для пользователя, approved для администратора
    """
    if user is None or not getattr(user, "is_authenticated", False):
        logger.info("create_event: нет сессии — пропуск")
        return None

    fields = {name: data.get(name) for name in EVENT_FIELDS}
    fields["description"] = fields["description"] or ""
    # пустые строки из формы = «время не задано»
    for name in ("start_time", "end_time"):
        if fields[name] == "":
            fields[name] = None

    event = Event(requested_by=user, status=status, **fields)
    try:
        event.full_clean()
        with transaction.atomic():
            event.save()
    except (ValidationError, DatabaseError) as exc:
        logger.warning("create_event: ошибка user_id=%s: %s", user.pk, exc)
        raise BackendError(_error_message(exc)) from exc
    logger.info("create_event: ok user_id=%s id=%s status=%s", user.pk, event.pk, status)
    return event


def update_event_status(event_id: Any, status: str) -> Event:
    """
    Сменить статус события. Меняется только поле status.

    Разрешены лишь переходы pending → approved и pending → rejected.
    """
    try:
        event = Event.objects.get(pk=event_id)
    except Event.DoesNotExist as exc:
        raise NotFoundError(f"Event {event_id} not found") from exc
    except DatabaseError as exc:
        logger.exception("update_event_status: ошибка id=%s", event_id)
        raise BackendError(_error_message(exc)) from exc

    if not event.can_transition_to(status):
        logger.warning(
            "update_event_status: запрещённый переход id=%s %s -> %s",
            event_id, event.status, status,
        )
        raise BackendError(f"Cannot change event status from {event.status} to {status}")

    event.status = status
    try:
        event.save(update_fields=["status"])
    except DatabaseError as exc:
        logger.exception("update_event_status: ошибка сохранения id=%s", event_id)
        raise BackendError(_error_message(exc)) from exc
    logger.info("update_event_status: id=%s -> %s", event_id, status)
    return event


def delete_event(event_id: Any) -> None:
    """Удалить событие по id."""
    try:
        event = Event.objects.get(pk=event_id)
        event.delete()
    except Event.DoesNotExist as exc:
        raise NotFoundError(f"Event {event_id} not found") from exc
    except DatabaseError as exc:
        logger.exception("delete_event: ошибка id=%s", event_id)
        raise BackendError(_error_message(exc)) from exc
    logger.info("delete_event: id=%s", event_id)


# ---------------------------------------------------------------------------
# ПРОФИЛИ И РОЛИ
# ---------------------------------------------------------------------------

def ensure_profile(user: Any, full_name: str = "") -> Profile:
    """Создать профиль пользователя при регистрации (или вернуть существующий)."""
    profile, created = Profile.objects.get_or_create(
        user=user,
        defaults={"full_name": full_name, "email": user.email or ""},
    )
    if created:
        logger.info("ensure_profile: создан профиль user_id=%s", user.pk)
    return profile


def fetch_profiles() -> List[Profile]:
    """Все профили, новые сверху."""
    try:
        return list(Profile.objects.order_by("-created_at"))
    except DatabaseError as exc:
        logger.exception("fetch_profiles: ошибка")
        raise BackendError(_error_message(exc)) from exc


def _set_approval_status(profile_id: Any, status: str) -> Profile:
    try:
        profile = Profile.objects.get(pk=profile_id)
        profile.approval_status = status
        profile.save(update_fields=["approval_status"])
    except Profile.DoesNotExist as exc:
        raise NotFoundError(f"Profile {profile_id} not found") from exc
    except DatabaseError as exc:
        logger.exception("set_approval_status: ошибка id=%s", profile_id)
        raise BackendError(_error_message(exc)) from exc
    logger.info("set_approval_status: profile_id=%s -> %s", profile_id, status)
    return profile


def approve_user(profile_id: Any) -> Profile:
    """
    Одобрить пользователя: статус профиля approved + роль `user`.

    Два независимых шага, без общей транзакции: если выдача роли не удалась,
    профиль остаётся одобренным, а ошибка уходит вызывающему.
    """
    profile = _set_approval_status(profile_id, ApprovalStatus.APPROVED)
    try:
        with transaction.atomic():
            UserRole.objects.create(user_id=profile.pk, role=UserRole.Role.USER)
    except DatabaseError as exc:
        logger.exception("approve_user: не удалось выдать роль user_id=%s", profile.pk)
        raise BackendError(_error_message(exc)) from exc
    return profile


def reject_user(profile_id: Any) -> Profile:
    """Отклонить пользователя (роль не выдаётся)."""
    return _set_approval_status(profile_id, ApprovalStatus.REJECTED)


def get_role(user: Any) -> Optional[str]:
    """
    Роль пользователя для редиректа: "admin", "user" или None.

    Если ролей несколько — побеждает admin.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    roles = set(UserRole.objects.filter(user=user).values_list("role", flat=True))
    if UserRole.Role.ADMIN in roles:
        return UserRole.Role.ADMIN.value
    if UserRole.Role.USER in roles:
        return UserRole.Role.USER.value
    return None


# ---------------------------------------------------------------------------
# СТАТИСТИКА
# ---------------------------------------------------------------------------

def dashboard_stats(
    profiles: Sequence[Profile],
    events: Sequence[Event],
    today: date_cls,
) -> Dict[str, int]:
    """
    Счётчики для карточек админского дашборда.

    - total_users: всего профилей;
    - pending_requests: профилей, ждущих одобрения;
    - upcoming_events: одобренных событий начиная с сегодняшнего дня.
    """
    return {
        "total_users": len(profiles),
        "pending_requests": sum(1 for p in profiles if p.approval_status == ApprovalStatus.PENDING),
        "upcoming_events": sum(
            1 for e in events
            if e.status == ApprovalStatus.APPROVED and e.event_date >= today
        ),
    }


__all__ = [
    "BackendError",
    "NotFoundError",
    "fetch_events",
    "create_event",
    "update_event_status",
    "delete_event",
    "ensure_profile",
    "fetch_profiles",
    "approve_user",
    "reject_user",
    "get_role",
    "dashboard_stats",
]
