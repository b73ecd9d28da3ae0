# orders/filters.py
"""
Фильтры для orders.
"""

import django_filters

from .models import Order, OrderStatus


class OrderFilter(django_filters.FilterSet):
    """
    Фильтр заказов по календарным дням и статусам.

    Параметры:
    - created_from: дата создания от (YYYY-MM-DD, включительно)
    - created_to: дата создания до (YYYY-MM-DD, включительно)
    - status: один или несколько статусов

    Даты сравниваются по локальной дате created_at в текущем часовом поясе.
    """

    created_from = django_filters.DateFilter(
        field_name="created_at",
        lookup_expr="date__gte"
    )
    created_to = django_filters.DateFilter(
        field_name="created_at",
        lookup_expr="date__lte"
    )
    status = django_filters.MultipleChoiceFilter(
        field_name="status",
        choices=OrderStatus.choices
    )

    class Meta:
        model = Order
        fields = ("status",)
