# orders/admin.py
"""
Django Admin для orders.
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import (
    Order,
    OrderItem,
    OrderMeta,
    OrderStatus,
)


class OrderItemInline(admin.TabularInline):
    """Inline для позиций заказа."""
    model = OrderItem
    extra = 0
    fields = ['product', 'name', 'quantity']
    autocomplete_fields = ['product']


class OrderMetaInline(admin.TabularInline):
    """Inline для метаданных заказа (pickup_date, pickup_time и т.д.)."""
    model = OrderMeta
    extra = 0
    fields = ['key', 'value']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin для заказов."""

    list_display = [
        'id', 'status',
        'billing_first_name', 'billing_last_name', 'billing_email',
        'created_at'
    ]

    list_filter = ['status', 'created_at']

    search_fields = ['id', 'billing_first_name', 'billing_last_name', 'billing_email']

    readonly_fields = ['updated_at', 'export_link']

    inlines = [OrderItemInline, OrderMetaInline]

    fieldsets = [
        ('Основное', {
            'fields': ['status', 'created_at']
        }),
        ('Плательщик', {
            'fields': ['billing_first_name', 'billing_last_name', 'billing_email']
        }),
        ('Системное', {
            'fields': ['updated_at', 'export_link'],
            'classes': ['collapse']
        }),
    ]

    def export_link(self, obj):
        """Ссылка на экран выгрузки заказов."""
        return format_html(
            '<a href="{}">Выгрузка заказов на самовывоз</a>',
            reverse('delivery_export:export-page')
        )

    export_link.short_description = 'Выгрузка'

    actions = ['mark_processing', 'mark_completed']

    def mark_processing(self, request, queryset):
        """Массовый перевод заказов в обработку."""
        updated = queryset.filter(status__in=[
            OrderStatus.PENDING, OrderStatus.ON_HOLD
        ]).update(status=OrderStatus.PROCESSING)
        self.message_user(request, f'В обработке: {updated} заказов')

    mark_processing.short_description = 'Перевести в обработку'

    def mark_completed(self, request, queryset):
        """Массовое завершение заказов."""
        updated = queryset.filter(status=OrderStatus.PROCESSING).update(
            status=OrderStatus.COMPLETED
        )
        self.message_user(request, f'Выполнено {updated} заказов')

    mark_completed.short_description = 'Отметить выбранные заказы выполненными'
