"""
wsgi.py
=======

WSGI-точка входа Django-проекта **Booking Calendar**.

Назначение:
- объект `application` для WSGI-сервера (gunicorn, uWSGI и др.).

Примечание:
SSE-стрим `/realtime/<collection>/` держит соединение открытым до
BOOKING_REALTIME_MAX_SECONDS, поэтому воркерам нужны потоки
(например, `gunicorn --threads 8 webapp.wsgi`).
"""

import os
from django.core.wsgi import get_wsgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "webapp.settings")

application = get_wsgi_application()
