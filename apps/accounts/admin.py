# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, UserRole, BusinessSettings, PublicPage


def _badge(label, background, color='white'):
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        background, color, label
    )


class BusinessSettingsInline(admin.StackedInline):
    model = BusinessSettings
    can_delete = False
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for rental business accounts.

    - Listing with role and status badges
    - Inline business settings
    - Bulk promote/demote and activate/deactivate actions
    """

    list_display = [
        'email',
        'display_name',
        'role_badge',
        'is_active_badge',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'role',
        'is_active',
        'is_staff',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
        'business_settings__business_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Permissions', {
            'fields': ('role', 'is_active', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
        ('Permissions', {
            'fields': ('role', 'is_active', 'is_staff'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = []
    inlines = [BusinessSettingsInline]

    def role_badge(self, obj):
        if obj.is_admin:
            return _badge('Admin', '#8b5cf6')
        return _badge('User', '#ccc', '#666')
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        if obj.is_active:
            return _badge('Active', '#10b981')
        return _badge('Inactive', '#ef4444')
    is_active_badge.short_description = 'Status'
    is_active_badge.admin_order_field = 'is_active'

    actions = ['activate_users', 'deactivate_users', 'make_admin', 'make_regular_user']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users, never superusers."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    @admin.action(description='Grant admin role')
    def make_admin(self, request, queryset):
        count = queryset.update(role=UserRole.ADMIN)
        self.message_user(request, f'Granted admin role to {count} user(s).')

    @admin.action(description='Revoke admin role')
    def make_regular_user(self, request, queryset):
        count = queryset.filter(is_superuser=False).update(role=UserRole.USER)
        self.message_user(request, f'Revoked admin role from {count} user(s).')


@admin.register(PublicPage)
class PublicPageAdmin(admin.ModelAdmin):
    list_display = ['slug', 'title', 'user', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['slug', 'title', 'user__email']
    raw_id_fields = ['user']
