"""
db.py

Прямая работа с PostgreSQL (psycopg2) для realtime-уведомлений.

Django ORM не умеет LISTEN, поэтому SSE-стрим на PostgreSQL открывает
отдельное соединение psycopg2, подписывается на каналы коллекций
(`events`, `profiles`) и ждёт уведомлений, которые шлёт
`bookingapp.realtime.publish()` через pg_notify.

Важно:
- Соединение открывается с autocommit=True: LISTEN и получение уведомлений
  не должны висеть внутри транзакции.
- Параметры подключения берутся из settings.DATABASES["default"].
"""

from __future__ import annotations

import logging
import select
from typing import Iterable, List

import psycopg2
from psycopg2 import Error as PGError
from psycopg2 import sql
from psycopg2.extensions import connection as PGConnection
from django.conf import settings

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Подключение к БД
# --------------------------------------------------------------------------- #
def get_connection() -> PGConnection:
    """
    Установить подключение к PostgreSQL по настройкам Django.

    Возвращает:
        PGConnection: активное соединение с автокоммитом.
    """
    db = settings.DATABASES["default"]
    conn: PGConnection = psycopg2.connect(
        host=db.get("HOST") or "localhost",
        port=db.get("PORT") or "5432",
        dbname=db["NAME"],
        user=db.get("USER"),
        password=db.get("PASSWORD"),
    )
    conn.autocommit = True
    logger.info("DB: LISTEN-подключение установлено (autocommit=%s).", conn.autocommit)
    return conn


# --------------------------------------------------------------------------- #
# LISTEN / NOTIFY
# --------------------------------------------------------------------------- #
def listen(conn: PGConnection, channels: Iterable[str]) -> None:
    """
    Подписать соединение на каналы уведомлений.

    Параметры:
        conn: psycopg2 connection (autocommit).
        channels: имена каналов (совпадают с именами коллекций).
    """
    channels = list(channels)
    try:
        with conn.cursor() as cur:
            for name in channels:
                cur.execute(sql.SQL("LISTEN {};").format(sql.Identifier(name)))
                logger.info("DB: LISTEN %s", name)
    except PGError:
        logger.exception("DB: listen ошибка channels=%s", channels)
        raise


def wait_for_notifications(conn: PGConnection, timeout: float) -> List[str]:
    """
    Дождаться уведомлений не дольше timeout секунд.

    Возвращает:
        Список имён каналов, по которым пришли уведомления (может быть пустым).
        Повторы сохраняются: потребителю всё равно, он перечитывает данные целиком.
    """
    try:
        ready, _, _ = select.select([conn], [], [], timeout)
        if not ready:
            return []
        conn.poll()
        received = []
        while conn.notifies:
            note = conn.notifies.pop(0)
            received.append(note.channel)
        logger.debug("DB: получены уведомления %s", received)
        return received
    except PGError:
        logger.exception("DB: wait_for_notifications ошибка")
        raise
