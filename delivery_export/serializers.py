# delivery_export/serializers.py
"""Сериализаторы для delivery_export."""

from rest_framework import serializers

from catalog.models import Category
from .services import default_order_statuses, parse_iso_date


class ExportCriteriaSerializer(serializers.Serializer):
    """
    Параметры фильтра выгрузки.

    Даты проверяются строго (YYYY-MM-DD целиком). Статусы и категории
    принимаются как есть: мусор отбрасывает OrderFilterService.
    """

    start_date = serializers.CharField(
        trim_whitespace=False,
        help_text='Начальная дата YYYY-MM-DD (включительно)'
    )

    end_date = serializers.CharField(
        trim_whitespace=False,
        help_text='Конечная дата YYYY-MM-DD (включительно)'
    )

    order_status = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        default=default_order_statuses,
        help_text='Коды статусов (по умолчанию processing, completed)'
    )

    parent_categories = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        default=list,
        help_text='ID родительских категорий (пусто = все категории)'
    )

    def _validate_date(self, value):
        parsed = parse_iso_date(value)
        if parsed is None:
            raise serializers.ValidationError('Дата должна быть в формате YYYY-MM-DD.')
        return parsed

    def validate_start_date(self, value):
        return self._validate_date(value)

    def validate_end_date(self, value):
        return self._validate_date(value)


class ExportRowSerializer(serializers.Serializer):
    """Строка выгрузки (ExportRow)."""
    id = serializers.IntegerField()
    date = serializers.CharField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    email = serializers.CharField()
    pickup_date = serializers.CharField()
    pickup_time = serializers.CharField()


class CategoryChoiceSerializer(serializers.ModelSerializer):
    """Родительская категория для выбора в фильтре."""

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug']


class StatusChoiceSerializer(serializers.Serializer):
    """Статус заказа для выбора в фильтре."""
    code = serializers.CharField()
    label = serializers.CharField()
    is_default = serializers.BooleanField()
