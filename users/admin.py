from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User, UserRole


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ['email', 'name', 'second_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'name', 'second_name']
    ordering = ['-created_at']

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Личная информация', {'fields': ('name', 'second_name')}),
        ('Роль и права', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser')}),
        ('Группы', {'fields': ('groups', 'user_permissions')}),
        ('Даты', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )

    readonly_fields = ['created_at', 'updated_at']

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'second_name', 'password1', 'password2', 'role'),
        }),
    )

    actions = ['make_shop_managers', 'block_users', 'unblock_users']

    def make_shop_managers(self, request, queryset):
        """Массовое назначение менеджерами магазина"""
        updated = 0
        for user in queryset.exclude(role=UserRole.ADMIN):
            user.role = UserRole.SHOP_MANAGER
            user.save(update_fields=['role', 'is_staff'])
            updated += 1
        self.message_user(request, f'Назначено менеджерами: {updated}')

    make_shop_managers.short_description = 'Сделать менеджерами магазина'

    def block_users(self, request, queryset):
        """Массовая блокировка пользователей"""
        updated = queryset.exclude(role=UserRole.ADMIN).update(is_active=False)
        self.message_user(request, f'Заблокировано {updated} пользователей')

    block_users.short_description = 'Заблокировать выбранных пользователей'

    def unblock_users(self, request, queryset):
        """Массовая разблокировка пользователей"""
        updated = queryset.update(is_active=True)
        self.message_user(request, f'Разблокировано {updated} пользователей')

    unblock_users.short_description = 'Разблокировать выбранных пользователей'
