from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import (
    Application,
    ApplicationNote,
    STARTED,
    PROCESSING,
    DOCUMENTS_SUBMITTED,
    PAYMENTS_PROCESSED,
    COMPLETED,
)


class NoteInline(admin.TabularInline):

    model = ApplicationNote
    extra = 0  # Notes are appended through the API
    readonly_fields = ['author', 'author_name', 'text', 'created_at']
    fields = ['created_at', 'author_name', 'text']
    classes = ['collapse']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """
        Override queryset to optimize database queries
        Use select_related to avoid N+1 queries
        """
        qs = super().get_queryset(request)
        return qs.select_related('author')


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):

    list_display = [
        'client_name',
        'phone_number',
        'completed_course',
        'status_badge',
        'counselor_display',
        'agent',
        'created_at',
    ]

    list_filter = [
        'application_status',
        'completed_course',
        'counselor',
        'created_at',
    ]

    search_fields = [
        'client_name',
        'client_email',
        'phone_number',
    ]

    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'

    fieldsets = [
        ('Client', {
            'fields': ['application_id', 'client_name', 'client_email', 'phone_number']
        }),
        ('Education', {
            'fields': ['completed_course', 'planned_courses', 'preferred_locations', 'preferred_colleges']
        }),
        ('Assignment & Status', {
            'fields': ['counselor', 'agent', 'application_status']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    readonly_fields = ['application_id', 'created_at', 'updated_at']
    inlines = [NoteInline]

    def status_badge(self, obj):
        """Display status with colored badge"""
        colors = {
            STARTED: '#17a2b8',
            PROCESSING: '#ffc107',
            DOCUMENTS_SUBMITTED: '#667eea',
            PAYMENTS_PROCESSED: '#fd7e14',
            COMPLETED: '#28a745',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            colors.get(obj.application_status, '#6c757d'),
            obj.get_application_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'application_status'

    def counselor_display(self, obj):
        if obj.counselor:
            return obj.counselor.get_display_name()
        return format_html('<span style="color: #999;">Unassigned</span>')
    counselor_display.short_description = 'Counselor'

    # Custom actions

    actions = [
        'mark_as_processing',
        'mark_as_completed',
        'unassign_counselor',
    ]

    def mark_as_processing(self, request, queryset):
        count = queryset.update(application_status=PROCESSING, updated_at=timezone.now())
        self.message_user(request, f'Updated {count} applications to "Processing"')
    mark_as_processing.short_description = 'Mark as "Processing"'

    def mark_as_completed(self, request, queryset):
        count = queryset.update(application_status=COMPLETED, updated_at=timezone.now())
        self.message_user(request, f'Updated {count} applications to "Completed"')
    mark_as_completed.short_description = 'Mark as "Completed"'

    def unassign_counselor(self, request, queryset):
        count = queryset.update(counselor=None, updated_at=timezone.now())
        self.message_user(request, f'Unassigned {count} applications')
    unassign_counselor.short_description = 'Remove counselor'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related(
            'counselor',
            'agent',
        )


@admin.register(ApplicationNote)
class ApplicationNoteAdmin(admin.ModelAdmin):
    list_display = ['application', 'author_name', 'text_preview', 'created_at']
    search_fields = ['text', 'author_name', 'application__client_name']
    readonly_fields = ['created_at']
    list_select_related = ['application']

    def text_preview(self, obj):
        return obj.text[:60] + '...' if len(obj.text) > 60 else obj.text
    text_preview.short_description = 'Note'
