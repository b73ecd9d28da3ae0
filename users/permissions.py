from rest_framework.permissions import BasePermission


class CanManageCommerce(BasePermission):
    """Разрешение для тех, кто управляет заказами магазина"""

    message = 'Недостаточно прав для управления заказами.'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.can_manage_commerce
        )
