"""
apps.py
=======

Конфигурация Django-приложения `bookingapp`.

Назначение:
- регистрирует приложение в системе Django;
- определяет читаемое имя (verbose_name);
- при готовности приложения подключает сигналы realtime-каналов.

Приложение включает:
- модели событий (Event), профилей (Profile) и ролей (UserRole);
- календарь месяца и дашборды администратора/пользователя;
- REST API (DRF) и SSE-стрим изменений.
"""

from django.apps import AppConfig


class BookingappConfig(AppConfig):
    """
    Конфигурация приложения бронирований.

    ready() импортирует `bookingapp.realtime`, чтобы receivers сигналов
    post_save/post_delete были зарегистрированы.
    """
    default_auto_field = "django.db.models.BigAutoField"
    name = "bookingapp"
    verbose_name = "Календарь бронирований"

    def ready(self) -> None:
        from . import realtime  # noqa: F401
