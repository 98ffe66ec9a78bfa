"""
urls.py
=======

Корневой маршрутизатор Django-проекта **Booking Calendar**.

Структура маршрутов:
- /django-admin/ — стандартная админка Django (роли, профили, события);
- /api/ — REST API (DRF);
- / — лендинг, вход, дашборды `/admin/` и `/user/`, SSE (`bookingapp`).
"""

from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # Панель Django (/admin/ занят дашбордом администратора)
    path("django-admin/", admin.site.urls),

    # DRF API
    path("api/", include("bookingapp.api.urls")),

    # Основное приложение
    path("", include("bookingapp.urls")),
]
