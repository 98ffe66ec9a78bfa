"""
settings_test.py
================

Настройки для pytest: те же, что в settings.py, но БД — SQLite в памяти,
чтобы тестам не был нужен PostgreSQL, и быстрый хешер паролей.
"""

from .settings import *  # noqa: F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

BOOKING_REALTIME_POLL_SECONDS = 0.01
BOOKING_REALTIME_MAX_SECONDS = 0.05
