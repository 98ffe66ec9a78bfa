"""
manage.py
==========

Командный интерфейс Django-проекта **Booking Calendar**.

Примеры использования:
----------------------
1. **Применение миграций (таблицы events, profiles, user_roles)**
    python manage.py migrate

2. **Создание первого администратора**
    python manage.py createsuperuser
    python manage.py grant_admin <username>

3. **Запуск сервера разработки**
    python manage.py runserver

После этого:
- `/` — лендинг, `/auth/` — вход и регистрация;
- `/admin/` — дашборд администратора, `/user/` — дашборд пользователя;
- `/django-admin/` — стандартная админка Django.
"""

import os
import sys


def main() -> None:
    """
    Точка входа командной оболочки Django.

    Устанавливает DJANGO_SETTINGS_MODULE и передаёт аргументы
    командной строки в `execute_from_command_line`.
    """
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings")

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Не удалось импортировать Django. "
            "Убедитесь, что оно установлено и доступно в текущем окружении."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
