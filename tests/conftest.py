"""
Pytest fixtures для тестов выгрузки заказов.

Дерево категорий:
    Продукты (A)
    ├── Молочное (B)
    │   └── Сыры (D)
    └── Выпечка (C)
    Посуда (E)
"""
from datetime import datetime

import pytest
from django.contrib.auth.models import Permission
from django.test import Client
from django.utils import timezone
from rest_framework.test import APIClient

from catalog.models import Category, Product, ProductType
from orders.models import Order, OrderItem, OrderMeta, OrderStatus
from users.models import User, UserRole


@pytest.fixture(autouse=True)
def test_settings(settings):
    """Фиксированный часовой пояс, HTTP без редиректа на HTTPS, статика без манифеста."""
    settings.TIME_ZONE = 'Europe/London'
    settings.SECURE_SSL_REDIRECT = False
    settings.STORAGES = {
        'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
        'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
    }
    settings.DELIVERY_EXPORT_FILENAME_PREFIX = 'orders-export'
    settings.DELIVERY_EXPORT_DEFAULT_STATUSES = ['processing', 'completed']
    return settings


def local_dt(year, month, day, hour=12, minute=0, second=0):
    """Aware datetime в текущем часовом поясе."""
    return timezone.make_aware(datetime(year, month, day, hour, minute, second))


# =============================================================================
# КАТАЛОГ
# =============================================================================

@pytest.fixture
def categories(db):
    """Дерево категорий A -> {B, C}, B -> {D} и отдельная E."""
    a = Category.objects.create(name='Продукты', slug='food')
    b = Category.objects.create(name='Молочное', slug='dairy', parent=a)
    c = Category.objects.create(name='Выпечка', slug='bakery', parent=a)
    d = Category.objects.create(name='Сыры', slug='cheese', parent=b)
    e = Category.objects.create(name='Посуда', slug='kitchenware')
    return {'A': a, 'B': b, 'C': c, 'D': d, 'E': e}


@pytest.fixture
def products(categories):
    """Простые товары, вариативный товар с вариацией и товар без категорий."""
    cheese = Product.objects.create(name='Чеддер', sku='CH-1')
    cheese.categories.add(categories['D'])

    plate = Product.objects.create(name='Тарелка', sku='PL-1')
    plate.categories.add(categories['E'])

    bread = Product.objects.create(name='Хлеб', sku='BR', product_type=ProductType.VARIABLE)
    bread.categories.add(categories['C'])

    bread_small = Product.objects.create(
        name='Хлеб 400 г',
        sku='BR-400',
        product_type=ProductType.VARIATION,
        parent=bread,
    )

    gift_card = Product.objects.create(name='Подарочная карта', sku='GC')

    return {
        'cheese': cheese,
        'plate': plate,
        'bread': bread,
        'bread_small': bread_small,
        'gift_card': gift_card,
    }


# =============================================================================
# ЗАКАЗЫ
# =============================================================================

@pytest.fixture
def make_order(db):
    """Фабрика заказов: make_order(created_at, status, items=[...], meta={...})."""

    def _make_order(
            created_at,
            status=OrderStatus.PROCESSING,
            items=(),
            meta=None,
            first_name='Анна',
            last_name='Петрова',
            email='anna@example.com',
    ):
        order = Order.objects.create(
            status=status,
            created_at=created_at,
            billing_first_name=first_name,
            billing_last_name=last_name,
            billing_email=email,
        )
        for product in items:
            OrderItem.objects.create(
                order=order,
                product=product,
                name='' if product else 'Удалённый товар',
            )
        for key, value in (meta or {}).items():
            OrderMeta.objects.create(order=order, key=key, value=value)
        return order

    return _make_order


# =============================================================================
# ПОЛЬЗОВАТЕЛИ
# =============================================================================

@pytest.fixture
def manager(db):
    return User.objects.create_user(
        email='manager@example.com',
        password='manager-pass-123',
        role=UserRole.SHOP_MANAGER,
    )


@pytest.fixture
def customer(db):
    return User.objects.create_user(
        email='customer@example.com',
        password='customer-pass-123',
    )


@pytest.fixture
def permitted_customer(db):
    """Покупатель, которому вручную выдано право orders.manage_commerce."""
    user = User.objects.create_user(
        email='helper@example.com',
        password='helper-pass-123',
        is_staff=True,
    )
    user.user_permissions.add(
        Permission.objects.get(codename='manage_commerce', content_type__app_label='orders')
    )
    return User.objects.get(pk=user.pk)


@pytest.fixture
def manager_client(manager):
    client = Client()
    client.force_login(manager)
    return client


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def manager_api_client(manager):
    client = APIClient()
    client.force_authenticate(user=manager)
    return client
