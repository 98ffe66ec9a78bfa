"""
admin.py
========

Регистрация моделей приложения `bookingapp` в панели администратора Django
(`/django-admin/`; адрес `/admin/` занят дашбордом администратора).

Модели:
- Profile — профили пользователей и их статус одобрения;
- UserRole — роли (admin / user);
- Event — заявки на бронирование.

Для каждой модели определены классы ModelAdmin с настройками
отображения, фильтрации и поиска.
"""
from __future__ import annotations

from django.contrib import admin
from .models import Event, Profile, UserRole


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Профиль пользователя: статус одобрения и счётчик заявок.
    """
    list_display = ("user", "full_name", "email", "approval_status", "events_total", "created_at")
    list_filter = ("approval_status",)
    search_fields = ("full_name", "email", "user__username")
    readonly_fields = ("created_at",)

    @admin.display(description="Заявок (всего)")
    def events_total(self, obj: Profile) -> int:
        return obj.user.requested_events.count()


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    """Роли пользователей."""
    list_display = ("user", "role")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """
    Админ-интерфейс для модели Event.

    Отображает заявки с датой, временем, статусом и автором;
    фильтры по статусу и дате.
    """
    list_display = ("id", "title", "event_date", "start_time", "end_time", "status", "requested_by")
    list_filter = ("status", "event_date")
    search_fields = ("title", "description", "requested_by__username")
    readonly_fields = ("created_at",)
