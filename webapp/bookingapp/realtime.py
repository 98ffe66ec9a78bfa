"""
realtime.py
===========

Каналы изменений (realtime) для коллекций `events` и `profiles`.

Модель простая: любой INSERT/UPDATE/DELETE строки коллекции «дёргает» канал,
подписчики получают сигнал без полезной нагрузки и сами перечитывают данные
целиком. Поэтому повторная доставка одного и того же уведомления безопасна.

Источники уведомлений:
- сигналы Django `post_save` / `post_delete` — внутри процесса;
- на PostgreSQL дополнительно `pg_notify(<канал>, '')`, чтобы другие процессы
  (например, SSE-стрим в другом воркере) могли слушать через LISTEN
  (см. bookingapp.db).
"""

from __future__ import annotations

import itertools
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from django.db import connection, transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import Event, Profile, UserRole

logger = logging.getLogger(__name__)

EVENTS = "events"
PROFILES = "profiles"

Handler = Callable[[Optional[Dict[str, Any]]], None]


class Subscription:
    """Подписка на канал. unsubscribe() можно вызывать сколько угодно раз."""

    def __init__(self, channel: "ChangeChannel", key: int) -> None:
        self._channel = channel
        self._key = key
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self._channel._remove(self._key)
        self.active = False


class ChangeChannel:
    """
    Канал изменений одной коллекции.

    version — монотонный счётчик уведомлений; SSE-стрим сравнивает его
    с последним отданным клиенту значением.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.version = 0
        self._handlers: Dict[int, Handler] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<ChangeChannel {self.name} v{self.version} subs={len(self._handlers)}>"

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: Handler) -> Subscription:
        with self._lock:
            key = next(self._ids)
            self._handlers[key] = handler
        logger.debug("realtime: subscribe channel=%s key=%s", self.name, key)
        return Subscription(self, key)

    def _remove(self, key: int) -> None:
        with self._lock:
            self._handlers.pop(key, None)
        logger.debug("realtime: unsubscribe channel=%s key=%s", self.name, key)

    def notify(self, payload: Optional[Dict[str, Any]] = None) -> None:
        """Разослать уведомление всем подписчикам; ошибка одного не мешает другим."""
        with self._lock:
            self.version += 1
            handlers = list(self._handlers.values())
        for handler in handlers:
            try:
                handler(payload)
            except Exception:  # noqa: BLE001
                logger.exception("realtime: handler failed on channel=%s", self.name)


_CHANNELS: Dict[str, ChangeChannel] = {}
_CHANNELS_LOCK = threading.Lock()


def channel(name: str) -> ChangeChannel:
    """Получить (или создать) канал по имени коллекции."""
    with _CHANNELS_LOCK:
        if name not in _CHANNELS:
            _CHANNELS[name] = ChangeChannel(name)
        return _CHANNELS[name]


@contextmanager
def subscribed(name_or_channel: Any, handler: Handler) -> Iterator[Subscription]:
    """Подписка на время блока with; отписка гарантирована."""
    ch = name_or_channel if isinstance(name_or_channel, ChangeChannel) else channel(name_or_channel)
    sub = ch.subscribe(handler)
    try:
        yield sub
    finally:
        sub.unsubscribe()


def _deliver(name: str, payload: Optional[Dict[str, Any]]) -> None:
    channel(name).notify(payload)
    if connection.vendor == "postgresql":
        with connection.cursor() as cur:
            cur.execute("SELECT pg_notify(%s, '')", [name])


def publish(name: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Уведомить канал внутри процесса и, на PostgreSQL, через pg_notify.

    Доставка откладывается до коммита текущей транзакции: при откате
    подписчики ничего не получают. Вне транзакции уходит сразу.
    """
    transaction.on_commit(lambda: _deliver(name, payload))


# ---------------------------------------------------------------------------
# Сигналы Django -> каналы
# ---------------------------------------------------------------------------

@receiver(post_save, sender=Event)
@receiver(post_delete, sender=Event)
def _events_changed(sender, instance: Event, **kwargs) -> None:
    kind = "DELETE" if "created" not in kwargs else ("INSERT" if kwargs["created"] else "UPDATE")
    publish(EVENTS, {"type": kind, "id": instance.pk})


@receiver(post_save, sender=Profile)
@receiver(post_delete, sender=Profile)
@receiver(post_save, sender=UserRole)
@receiver(post_delete, sender=UserRole)
def _profiles_changed(sender, instance: Any, **kwargs) -> None:
    kind = "DELETE" if "created" not in kwargs else ("INSERT" if kwargs["created"] else "UPDATE")
    publish(PROFILES, {"type": kind, "id": instance.pk})
