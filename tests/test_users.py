"""
Tests for the shop management capability.
"""
import pytest

from users.models import User, UserRole

pytestmark = pytest.mark.django_db


class TestCanManageCommerce:

    def test_roles(self, manager, customer):
        assert manager.can_manage_commerce is True
        assert manager.is_staff is True
        assert customer.can_manage_commerce is False

    def test_superuser(self):
        admin = User.objects.create_superuser(email='root@example.com', password='root-pass-123')

        assert admin.role == UserRole.ADMIN
        assert admin.can_manage_commerce is True

    def test_explicit_permission(self, permitted_customer):
        assert permitted_customer.role == UserRole.CUSTOMER
        assert permitted_customer.can_manage_commerce is True

    def test_blocked_user(self, manager):
        manager.is_active = False

        assert manager.can_manage_commerce is False

    def test_email_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email='', password='x')
