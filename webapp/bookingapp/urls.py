"""
urls.py
=======

Маршруты (URL patterns) приложения `bookingapp`.

Страницы:
- `/` — лендинг (вошедших перенаправляет по роли);
- `/auth/` — вход и регистрация, `/auth/signout/` — выход;
- `/admin/` — дашборд администратора и его POST-действия;
- `/user/` — дашборд пользователя и создание заявки;
- `/realtime/<collection>/` — SSE-стрим изменений.
"""
from django.urls import path
from . import views

urlpatterns = [
    path("", views.index, name="index"),
    path("auth/", views.auth_page, name="auth"),
    path("auth/signout/", views.sign_out, name="sign_out"),

    path("admin/", views.admin_dashboard, name="admin_dashboard"),
    path("admin/events/new/", views.admin_create_event, name="admin_create_event"),
    path("admin/events/<int:pk>/delete/", views.admin_event_delete, name="admin_event_delete"),
    path("admin/events/<int:pk>/<str:status>/", views.admin_event_status, name="admin_event_status"),
    path("admin/users/<int:pk>/<str:decision>/", views.admin_user_decision, name="admin_user_decision"),

    path("user/", views.user_dashboard, name="user_dashboard"),
    path("user/requests/new/", views.user_create_request, name="user_create_request"),

    path("realtime/<str:collection>/", views.realtime_stream, name="realtime_stream"),
]
