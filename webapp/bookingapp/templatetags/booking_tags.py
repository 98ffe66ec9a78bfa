"""
Шаблонные фильтры: статус события -> цвет / бейдж / подпись.

    {% load booking_tags %}
    <div class="chip {{ event.status|status_color }}">...</div>
    <span class="badge badge-{{ event.status|status_badge }}">{{ event.status|status_label }}</span>
"""

from django import template

from bookingapp.calendar_view import status_badge_variant, status_color, status_label

register = template.Library()

register.filter("status_color", status_color)
register.filter("status_badge", status_badge_variant)
register.filter("status_label", status_label)
