"""
models.py
=========

ORM-модели приложения `bookingapp`.

Содержит три сущности:

1. **Profile** — профиль зарегистрированного пользователя (таблица `profiles`).
   - Создаётся при регистрации со статусом `pending`.
   - Администратор одобряет или отклоняет его; без одобрения дашборд недоступен.

2. **UserRole** — роль пользователя (таблица `user_roles`): `admin` или `user`.
   - Строка с ролью `user` добавляется при одобрении профиля.

3. **Event** — заявка на бронирование / событие календаря (таблица `events`).
   - Пользователь создаёт заявку со статусом `pending`,
     администратор — сразу `approved`.
   - Допустимые переходы: pending → approved, pending → rejected.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models


class ApprovalStatus(models.TextChoices):
    """Статусы одобрения (общие для профилей и событий)."""
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


# ---------------------------------------------------------------------------
# Profile — профили пользователей
# ---------------------------------------------------------------------------

class Profile(models.Model):
    """
    Профиль пользователя.

    id профиля совпадает с id пользователя Django (OneToOne как первичный ключ),
    чтобы `profiles.id` и `events.requested_by` ссылались на одно и то же.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        primary_key=True,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name="Пользователь",
    )
    full_name = models.CharField("Полное имя", max_length=255, blank=True, default="")
    email = models.EmailField("Email", blank=True, default="")
    approval_status = models.CharField(
        "Статус одобрения",
        max_length=20,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        db_index=True,
    )
    created_at = models.DateTimeField("Создан", auto_now_add=True)

    class Meta:
        db_table = "profiles"
        verbose_name = "Профиль"
        verbose_name_plural = "Профили"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.display_name} <{self.email}> [{self.approval_status}]"

    @property
    def display_name(self) -> str:
        return self.full_name or "No name"

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED


# ---------------------------------------------------------------------------
# UserRole — роли
# ---------------------------------------------------------------------------

class UserRole(models.Model):
    """Роль пользователя. У пользователя может быть несколько строк-ролей."""

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        USER = "user", "User"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="roles",
        verbose_name="Пользователь",
    )
    role = models.CharField("Роль", max_length=20, choices=Role.choices)

    class Meta:
        db_table = "user_roles"
        verbose_name = "Роль пользователя"
        verbose_name_plural = "Роли пользователей"
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="user_roles_user_role_uniq"),
        ]

    def __str__(self) -> str:
        return f"{self.user_id}: {self.role}"


# ---------------------------------------------------------------------------
# Event — заявки на бронирование
# ---------------------------------------------------------------------------

class Event(models.Model):
    """
    Событие календаря (заявка на бронирование).

    Меняется только статус (и только администратором) либо удаляется целиком.
    """
    Status = ApprovalStatus

    title = models.CharField("Название", max_length=255)
    description = models.TextField("Описание", blank=True, default="")
    event_date = models.DateField("Дата", db_index=True)
    start_time = models.TimeField("Начало", null=True, blank=True)
    end_time = models.TimeField("Окончание", null=True, blank=True)
    status = models.CharField(
        "Статус",
        max_length=20,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
        db_index=True,
    )
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="requested_events",
        verbose_name="Кем запрошено",
    )
    created_at = models.DateTimeField("Создано", auto_now_add=True)

    class Meta:
        db_table = "events"
        verbose_name = "Событие"
        verbose_name_plural = "События"
        ordering = ["event_date"]

    def __str__(self) -> str:
        return f"{self.title} @ {self.event_date} [{self.status}]"

    def can_transition_to(self, status: str) -> bool:
        """Разрешены только pending → approved и pending → rejected."""
        return self.status == ApprovalStatus.PENDING and status in (
            ApprovalStatus.APPROVED,
            ApprovalStatus.REJECTED,
        )

    @property
    def time_range(self) -> str:
        """Строка «ЧЧ:ММ - ЧЧ:ММ» для карточки события (пустые концы допустимы)."""
        start = self.start_time.strftime("%H:%M") if self.start_time else ""
        end = self.end_time.strftime("%H:%M") if self.end_time else ""
        return f"{start} - {end}"
