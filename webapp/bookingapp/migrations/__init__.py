"""
webapp.bookingapp.migrations
============================

Пакет миграций Django-приложения `bookingapp`.

Хранит файлы миграций, создаваемые командами:

    python manage.py makemigrations
    python manage.py migrate

Назначение:
контроль версий структуры таблиц `events`, `profiles` и `user_roles`.
"""
