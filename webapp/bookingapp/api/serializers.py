"""
serializers.py
==============

DRF-сериализаторы для моделей бронирований и ячеек календаря.
"""

from __future__ import annotations

from rest_framework import serializers

from bookingapp.calendar_view import status_color
from bookingapp.models import ApprovalStatus, Event, Profile


class EventSerializer(serializers.ModelSerializer):
    """
    Сериализатор событий.

    Важно:
    - status и requested_by read-only: статус выставляет сервер по роли автора,
      автор берётся из сессии/токена.
    """

    color = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id", "title", "description", "event_date", "start_time", "end_time",
            "status", "requested_by", "created_at", "color",
        ]
        read_only_fields = ["id", "status", "requested_by", "created_at", "color"]

    def get_color(self, obj: Event) -> str:
        return status_color(obj.status)


class EventStatusSerializer(serializers.Serializer):
    """PATCH статуса: только approved / rejected."""

    status = serializers.ChoiceField(choices=[ApprovalStatus.APPROVED, ApprovalStatus.REJECTED])


class ProfileSerializer(serializers.ModelSerializer):
    """Профиль пользователя для админки."""

    id = serializers.IntegerField(source="pk", read_only=True)

    class Meta:
        model = Profile
        fields = ["id", "full_name", "email", "approval_status", "created_at"]
        read_only_fields = fields


class DayCellSerializer(serializers.Serializer):
    """Ячейка месяца: дата, флаги и не больше двух видимых событий."""

    date = serializers.DateField()
    is_today = serializers.BooleanField()
    in_current_month = serializers.BooleanField()
    visible_events = EventSerializer(many=True)
    hidden_count = serializers.IntegerField()
    overflow_label = serializers.CharField()
    event_count = serializers.SerializerMethodField()

    def get_event_count(self, cell) -> int:
        return len(cell.events)
