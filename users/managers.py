# users/managers.py
"""
Менеджер пользователей: вход по email, роль задаётся явно.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Менеджер пользователей.

    Суперпользователь всегда получает роль admin, остальные по умолчанию
    создаются покупателями.
    """

    use_in_migrations = True

    def create_user(
        self,
        email: str,
        password: str = None,
        **extra_fields
    ):
        """
        Создает пользователя.

        Args:
            email: Email пользователя (используется как логин)
            password: Пароль
            **extra_fields: Дополнительные поля (role, name, second_name)

        Returns:
            User: Созданный пользователь

        Raises:
            ValueError: Если email не указан
        """
        if not email:
            raise ValueError('Email обязателен')

        email = self.normalize_email(email)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_superuser(
        self,
        email: str,
        password: str = None,
        **extra_fields
    ):
        """
        Создает суперпользователя (администратора).

        Args:
            email: Email
            password: Пароль
            **extra_fields: Дополнительные поля

        Returns:
            User: Созданный суперпользователь
        """
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Суперпользователь должен иметь is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Суперпользователь должен иметь is_superuser=True')

        return self.create_user(email, password, **extra_fields)
