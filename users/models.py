# users/models.py
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from .managers import UserManager


class UserRole(models.TextChoices):
    ADMIN = 'admin', 'Администратор'
    SHOP_MANAGER = 'shop_manager', 'Менеджер магазина'
    CUSTOMER = 'customer', 'Покупатель'


# Роли, которым доступно управление заказами магазина
COMMERCE_ROLES = (UserRole.ADMIN, UserRole.SHOP_MANAGER)


class User(AbstractBaseUser, PermissionsMixin):
    """Кастомная модель пользователя с ролями магазина"""

    # Основные поля
    email = models.EmailField(
        max_length=254,
        unique=True,
        verbose_name='Email'
    )
    name = models.CharField(max_length=100, blank=True, verbose_name='Имя')
    second_name = models.CharField(max_length=100, blank=True, verbose_name='Фамилия')

    # Роль и статусы
    role = models.CharField(
        max_length=16,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
        verbose_name='Роль'
    )
    is_active = models.BooleanField(default=True, verbose_name='Активен (не заблокирован)')
    is_staff = models.BooleanField(default=False, verbose_name='Персонал')

    created_at = models.DateTimeField(auto_now_add=True, verbose_name='Дата создания')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Дата обновления')

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        verbose_name = 'Пользователь'
        verbose_name_plural = 'Пользователи'
        ordering = ['-created_at']

    def __str__(self):
        full_name = self.get_full_name()
        return f"{full_name} ({self.email})" if full_name else self.email

    def get_full_name(self):
        """Возвращает полное имя пользователя"""
        return f"{self.name} {self.second_name}".strip()

    def get_short_name(self):
        """Возвращает короткое имя пользователя"""
        return self.name or self.email

    @property
    def can_manage_commerce(self) -> bool:
        """
        Может ли пользователь управлять заказами магазина.

        Доступ есть у активных суперпользователей, ролей admin / shop_manager
        и у всех, кому выдано право orders.manage_commerce.
        """
        if not self.is_active:
            return False
        if self.is_superuser or self.role in COMMERCE_ROLES:
            return True
        return self.has_perm('orders.manage_commerce')

    def save(self, *args, **kwargs):
        """Переопределение сохранения"""
        # Администраторы и менеджеры автоматически становятся персоналом
        if self.role in COMMERCE_ROLES:
            self.is_staff = True

        super().save(*args, **kwargs)
