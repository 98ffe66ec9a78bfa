"""
grant_admin
===========

Выдать пользователю роль администратора бронирований.

    python manage.py grant_admin <username>

Заодно одобряет профиль (создаёт его, если пользователь заведён через
createsuperuser и профиля ещё нет).
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from bookingapp.models import ApprovalStatus, UserRole
from bookingapp.services import ensure_profile

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Grant the booking admin role to an existing user."

    def add_arguments(self, parser) -> None:
        parser.add_argument("username")

    def handle(self, *args, **options) -> None:
        User = get_user_model()
        try:
            user = User.objects.get(username=options["username"])
        except User.DoesNotExist as exc:
            raise CommandError(f"User {options['username']!r} does not exist") from exc

        profile = ensure_profile(user, full_name=user.get_full_name())
        if profile.approval_status != ApprovalStatus.APPROVED:
            profile.approval_status = ApprovalStatus.APPROVED
            profile.save(update_fields=["approval_status"])
        _, created = UserRole.objects.get_or_create(user=user, role=UserRole.Role.ADMIN)

        logger.info("grant_admin: user_id=%s created=%s", user.pk, created)
        self.stdout.write(self.style.SUCCESS(
            f"{user.username} is now an admin" if created else f"{user.username} already was an admin"
        ))
