from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html
from django.db.models import Count

from .actor import ADMIN, COUNSELOR
from .models import User


# CUSTOM USER ADMIN
@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = (
        'email',
        'username',
        'role_badge',
        'is_active_badge',
        'application_count',
        'date_joined',
    )

    # Fields that can be clicked to open edit form
    list_display_links = ('email', 'username')

    # Filters in right sidebar
    list_filter = (
        'role',
        'is_active',
        'is_staff',
        'is_superuser',
        'date_joined',
    )
    search_fields = (
        'email',
        'username',
    )

    ordering = ('-date_joined',)
    list_per_page = 25

    fieldsets = (
        # Basic Information
        (_('Login Credentials'), {
            'fields': ('email', 'password'),
            'classes': ('wide',),
            'description': _('Email is used for login. Password is stored encrypted.')
        }),

        (_('Profile'), {
            'fields': ('username', 'role'),
            'classes': ('wide',),
            'description': _('Display name and role (admin, counselor or agent)')
        }),

        # Permissions
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),

        # Activity Tracking
        (_('Activity Tracking'), {
            'fields': ('date_joined', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    # Fields shown when creating NEW user
    add_fieldsets = (
        (_('Login Credentials'), {
            'fields': ('email', 'password1', 'password2'),
            'classes': ('wide',),
        }),
        (_('Profile'), {
            'fields': ('username', 'role'),
            'classes': ('wide',),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff'),
        }),
    )

    readonly_fields = (
        'date_joined',
        'last_login',
    )

    # CUSTOM DISPLAY METHODS
    def role_badge(self, obj):

        if obj.role == ADMIN:
            color = '#28a745'  # Green
        elif obj.role == COUNSELOR:
            color = '#6f42c1'  # Purple
        else:
            color = '#007bff'  # Blue

        return format_html(
            '<span style="background: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color, obj.get_role_display()
        )

    role_badge.short_description = _('Role')
    role_badge.admin_order_field = 'role'

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html(
                '<span style="background: #28a745; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-size: 11px;">✓ Active</span>'
            )
        else:
            return format_html(
                '<span style="background: #dc3545; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-size: 11px;">✗ Inactive</span>'
            )

    is_active_badge.short_description = _('Status')
    is_active_badge.admin_order_field = 'is_active'

    def application_count(self, obj):
        """Assigned applications for counselors, submitted ones for everybody else"""
        if obj.role == COUNSELOR:
            return obj.counseled_count
        return obj.submitted_count

    application_count.short_description = _('Applications')

    # CUSTOM ACTIONS
    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        """
        Bulk action: Activate selected users
        """
        updated = queryset.update(is_active=True)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully activated.') % {'count': updated},
            level='success'
        )

    activate_users.short_description = _('Activate selected users')

    def deactivate_users(self, request, queryset):
        """
        Bulk action: Deactivate selected users

        Note: Cannot deactivate superusers
        """
        # Exclude superusers
        queryset = queryset.filter(is_superuser=False)
        updated = queryset.update(is_active=False)
        self.message_user(
            request,
            _('%(count)d user(s) were successfully deactivated.') % {'count': updated},
            level='success'
        )

    deactivate_users.short_description = _('Deactivate selected users')

    # CUSTOM QUERYSET (for performance)
    def get_queryset(self, request):

        queryset = super().get_queryset(request)
        queryset = queryset.annotate(
            counseled_count=Count('counseled_applications', distinct=True),
            submitted_count=Count('submitted_applications', distinct=True),
        )
        return queryset

    # PERMISSIONS
    def has_delete_permission(self, request, obj=None):
        if obj and obj == request.user:
            return False  # Cannot delete yourself

        if obj and obj.is_superuser and not request.user.is_superuser:
            return False  # Cannot delete superuser unless you are one

        return super().has_delete_permission(request, obj)


# ADMIN SITE CUSTOMIZATION
admin.site.site_header = _('Admissions Desk Administration')
admin.site.site_title = _('Admissions Desk')
admin.site.index_title = _('Welcome to Admissions Desk Admin Panel')
