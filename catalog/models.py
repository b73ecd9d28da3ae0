# catalog/models.py
"""
Модели каталога: дерево категорий и товары с вариациями.

ВАЖНО:
- Категория без родителя = "родительская категория" (выбирается в фильтре выгрузки)
- Вариация не хранит собственных категорий, они берутся у родительского товара
"""

from __future__ import annotations

from typing import Set

from django.core.exceptions import ValidationError
from django.db import models, transaction


# =============================================================================
# КАТЕГОРИИ
# =============================================================================

class Category(models.Model):
    """
    Категория товаров (дерево произвольной глубины).

    При удалении категории её дочерние категории переходят к её родителю.
    """

    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )

    slug = models.SlugField(
        max_length=200,
        unique=True,
        allow_unicode=True,
        verbose_name='Слаг'
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='children',
        verbose_name='Родительская категория'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'product_categories'
        verbose_name = 'Категория'
        verbose_name_plural = 'Категории'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None

    def clean(self):
        """Запрет циклов в дереве."""
        super().clean()

        if self.pk and self.parent_id:
            seen = set()
            ancestor = self.parent
            while ancestor is not None and ancestor.pk not in seen:
                if ancestor.pk == self.pk:
                    raise ValidationError({
                        'parent': 'Категория не может быть вложена сама в себя'
                    })
                seen.add(ancestor.pk)
                ancestor = ancestor.parent

    @transaction.atomic
    def delete(self, *args, **kwargs):
        """Дочерние категории переходят к родителю удаляемой."""
        Category.objects.filter(parent=self).update(parent_id=self.parent_id)
        return super().delete(*args, **kwargs)


# =============================================================================
# ТОВАРЫ
# =============================================================================

class ProductType(models.TextChoices):
    SIMPLE = 'simple', 'Простой'
    VARIABLE = 'variable', 'Вариативный'
    VARIATION = 'variation', 'Вариация'


class Product(models.Model):
    """
    Товар в каталоге.

    Вариация (product_type=variation) ссылается на родительский вариативный
    товар и наследует его категории.
    """

    name = models.CharField(
        max_length=200,
        verbose_name='Название'
    )

    sku = models.CharField(
        max_length=64,
        blank=True,
        verbose_name='Артикул'
    )

    product_type = models.CharField(
        max_length=10,
        choices=ProductType.choices,
        default=ProductType.SIMPLE,
        verbose_name='Тип товара'
    )

    parent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='variations',
        limit_choices_to={'product_type': ProductType.VARIABLE},
        verbose_name='Родительский товар',
        help_text='Только для вариаций'
    )

    categories = models.ManyToManyField(
        Category,
        blank=True,
        related_name='products',
        verbose_name='Категории'
    )

    is_active = models.BooleanField(default=True, verbose_name='Активен')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        verbose_name = 'Товар'
        verbose_name_plural = 'Товары'
        ordering = ['name']
        indexes = [
            models.Index(fields=['product_type'], name='products_type_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def is_variation(self) -> bool:
        return self.product_type == ProductType.VARIATION

    def clean(self):
        super().clean()

        if self.is_variation and not self.parent_id:
            raise ValidationError({
                'parent': 'Вариация должна ссылаться на родительский товар'
            })

        if not self.is_variation and self.parent_id:
            raise ValidationError({
                'parent': 'Родительский товар указывается только для вариаций'
            })

    def category_ids_for_matching(self) -> Set[int]:
        """
        Категории, по которым товар участвует в фильтре выгрузки.

        Для вариации берутся категории родителя. Если родитель удалён,
        категорий нет. Использует prefetch-кеш, если он загружен.
        """
        source = self.parent if self.is_variation else self
        if source is None:
            return set()
        return {category.pk for category in source.categories.all()}
