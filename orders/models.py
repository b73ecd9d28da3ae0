# orders/models.py
"""
Модели заказов интернет-магазина.

МОДЕЛИ:
- Order: Заказ покупателя (контакт плательщика, статус, дата создания)
- OrderItem: Позиция заказа (ссылка на товар, может быть обнулена при удалении товара)
- OrderMeta: Произвольные метаданные заказа (key/value), например pickup_date и
  pickup_time, которые проставляет внешний плагин самовывоза

Для выгрузки эти данные только читаются.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


# =============================================================================
# СТАТУСЫ ЗАКАЗОВ
# =============================================================================

class OrderStatus(models.TextChoices):
    """Статусы заказа интернет-магазина."""
    PENDING = 'pending', _('Ожидает оплаты')
    PROCESSING = 'processing', _('В обработке')
    ON_HOLD = 'on-hold', _('На удержании')
    COMPLETED = 'completed', _('Выполнен')
    CANCELLED = 'cancelled', _('Отменён')
    REFUNDED = 'refunded', _('Возвращён')
    FAILED = 'failed', _('Не удался')
    CHECKOUT_DRAFT = 'checkout-draft', _('Черновик')


# Статусы могут приходить в старом формате с префиксом: wc-processing
LEGACY_STATUS_PREFIX = 'wc-'


def normalize_status_code(code) -> str:
    """Привести код статуса к виду без префикса wc-."""
    code = str(code).strip()
    if code.startswith(LEGACY_STATUS_PREFIX):
        code = code[len(LEGACY_STATUS_PREFIX):]
    return code


# =============================================================================
# ЗАКАЗЫ
# =============================================================================

class Order(models.Model):
    """
    Заказ покупателя.

    ВАЖНО:
    - created_at редактируемое (импорт заказов переносит исходную дату)
    - порядок по умолчанию: новые сверху, при равной дате - больший id выше
    """

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        verbose_name='Статус'
    )

    billing_first_name = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Имя (плательщик)'
    )

    billing_last_name = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Фамилия (плательщик)'
    )

    billing_email = models.CharField(
        max_length=254,
        blank=True,
        verbose_name='Email (плательщик)'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        verbose_name='Дата создания'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Дата обновления'
    )

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at', '-id']
        verbose_name = 'Заказ'
        verbose_name_plural = 'Заказы'
        indexes = [
            models.Index(fields=['status', '-created_at'], name='orders_status_created_idx'),
            models.Index(fields=['-created_at'], name='orders_created_idx'),
        ]
        permissions = [
            ('manage_commerce', 'Может управлять заказами магазина'),
        ]

    def __str__(self) -> str:
        return f"Заказ #{self.id} ({self.get_status_display()})"

    def get_meta(self, key: str, default: str = '') -> str:
        """
        Значение метаданных заказа по ключу.

        Использует prefetch-кеш meta, если он загружен. Отсутствующий ключ
        или пустое значение возвращают default.
        """
        for entry in self.meta.all():
            if entry.key == key:
                return entry.value if entry.value is not None else default
        return default


class OrderItem(models.Model):
    """
    Позиция заказа.

    product обнуляется при удалении товара, название сохраняется.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name='Заказ'
    )

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='order_items',
        verbose_name='Товар'
    )

    name = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Название позиции'
    )

    quantity = models.PositiveIntegerField(
        default=1,
        verbose_name='Количество'
    )

    class Meta:
        db_table = 'order_items'
        verbose_name = 'Позиция заказа'
        verbose_name_plural = 'Позиции заказов'

    def __str__(self) -> str:
        return f"{self.name or self.product} x {self.quantity}"

    def save(self, *args, **kwargs) -> None:
        """Название позиции по умолчанию берётся из товара."""
        if not self.name and self.product_id:
            self.name = self.product.name

        super().save(*args, **kwargs)


class OrderMeta(models.Model):
    """Метаданные заказа (строковые пары ключ/значение)."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='meta',
        verbose_name='Заказ'
    )

    key = models.CharField(
        max_length=255,
        verbose_name='Ключ'
    )

    value = models.TextField(
        blank=True,
        verbose_name='Значение'
    )

    class Meta:
        db_table = 'order_meta'
        verbose_name = 'Метаданные заказа'
        verbose_name_plural = 'Метаданные заказов'
        unique_together = ['order', 'key']

    def __str__(self) -> str:
        return f"#{self.order_id} {self.key}={self.value}"
