# catalog/admin.py
"""Django Admin для catalog."""

from django.contrib import admin

from .models import Category, Product, ProductType


class ChildCategoryInline(admin.TabularInline):
    """Инлайн для дочерних категорий."""
    model = Category
    fk_name = 'parent'
    extra = 0
    fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    verbose_name = 'Дочерняя категория'
    verbose_name_plural = 'Дочерние категории'


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin для категорий."""

    list_display = ['name', 'slug', 'parent', 'products_count']

    list_filter = ['parent']

    search_fields = ['name', 'slug']

    prepopulated_fields = {'slug': ('name',)}

    inlines = [ChildCategoryInline]

    def products_count(self, obj):
        """Количество товаров непосредственно в категории."""
        return obj.products.count()

    products_count.short_description = 'Товаров'


class VariationInline(admin.TabularInline):
    """Инлайн для вариаций товара."""
    model = Product
    fk_name = 'parent'
    extra = 0
    fields = ['name', 'sku', 'product_type', 'is_active']
    verbose_name = 'Вариация'
    verbose_name_plural = 'Вариации'


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin для товаров."""

    list_display = [
        'name',
        'sku',
        'product_type',
        'parent',
        'is_active',
        'created_at'
    ]

    list_filter = [
        'product_type',
        'is_active',
        'categories',
    ]

    search_fields = ['name', 'sku']

    filter_horizontal = ['categories']

    readonly_fields = ['created_at', 'updated_at']

    fieldsets = [
        ('Основное', {
            'fields': ['name', 'sku', 'product_type', 'parent', 'is_active']
        }),
        ('Категории', {
            'fields': ['categories'],
            'description': 'Вариации наследуют категории родительского товара'
        }),
        ('Системное', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        })
    ]

    def get_inlines(self, request, obj):
        if obj is not None and obj.product_type == ProductType.VARIABLE:
            return [VariationInline]
        return []
