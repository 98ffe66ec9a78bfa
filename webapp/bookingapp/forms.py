"""
forms.py
========

Формы веб-части: регистрация и заявка на событие.
"""

from __future__ import annotations

from django import forms
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth.models import User

from .models import Event


class SignUpForm(UserCreationForm):
    """Регистрация: логин = email, плюс полное имя для профиля."""

    full_name = forms.CharField(label="Full name", max_length=255, required=False)
    email = forms.EmailField(label="Email")

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ("username", "email", "full_name")


class EventForm(forms.ModelForm):
    """Новое событие / заявка на бронирование. Статус выставляет сервер."""

    class Meta:
        model = Event
        fields = ["title", "description", "event_date", "start_time", "end_time"]
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "event_date": forms.DateInput(attrs={"type": "date"}),
            "start_time": forms.TimeInput(attrs={"type": "time"}),
            "end_time": forms.TimeInput(attrs={"type": "time"}),
        }

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start_time"), cleaned.get("end_time")
        if start and end and end < start:
            raise forms.ValidationError("End time must be after start time.")
        return cleaned
