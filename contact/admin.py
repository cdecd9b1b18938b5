"""
Contact Management Django Admin Configuration
"""
from django.contrib import admin, messages
from django.http import HttpResponse
from django.utils.html import format_html

from .exceptions import ReportError
from .models import ContactMessage
from .reports import XLSX_CONTENT_TYPE, ContactReportBuilder, get_report_filename


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    """Admin interface for contact messages."""

    list_display = [
        'name', 'email', 'phone', 'status_badge', 'ip_address', 'created_at'
    ]

    list_filter = [
        'status', 'created_at'
    ]

    search_fields = [
        'name', 'email', 'phone', 'message'
    ]

    readonly_fields = [
        'id', 'ip_address', 'user_agent', 'created_at', 'updated_at'
    ]

    fieldsets = (
        ('Contact Information', {
            'fields': ('name', 'email', 'phone', 'linkedin_profile', 'message')
        }),
        ('Status', {
            'fields': ('status',)
        }),
        ('Security & Tracking', {
            'fields': ('ip_address', 'user_agent'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['mark_as_read', 'mark_as_replied', 'archive_messages', 'export_to_excel']

    STATUS_COLOURS = {
        ContactMessage.STATUS_NEW: '#1976D2',
        ContactMessage.STATUS_READ: '#F57C00',
        ContactMessage.STATUS_REPLIED: '#388E3C',
        ContactMessage.STATUS_ARCHIVED: '#757575',
    }

    def status_badge(self, obj):
        """Coloured status label."""
        return format_html(
            '<strong style="color: {};">{}</strong>',
            self.STATUS_COLOURS.get(obj.status, '#333'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def _apply(self, request, queryset, method, label):
        count = 0
        for contact in queryset:
            getattr(contact, method)()
            count += 1
        self.message_user(request, f"{count} message(s) marked as {label}.")

    @admin.action(description='Mark selected messages as read')
    def mark_as_read(self, request, queryset):
        self._apply(request, queryset, 'mark_read', 'read')

    @admin.action(description='Mark selected messages as replied')
    def mark_as_replied(self, request, queryset):
        self._apply(request, queryset, 'mark_replied', 'replied')

    @admin.action(description='Archive selected messages')
    def archive_messages(self, request, queryset):
        self._apply(request, queryset, 'archive', 'archived')

    @admin.action(description='Export all messages to Excel')
    def export_to_excel(self, request, queryset):
        """Download the full contact database, same workbook as the email attachment."""
        try:
            content = ContactReportBuilder().build()
        except ReportError as e:
            self.message_user(request, f"Export failed: {e.message}", level=messages.ERROR)
            return None

        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{get_report_filename()}"'
        return response

    def has_add_permission(self, request):
        """Messages only arrive through the contact form."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Only super admins can delete."""
        return request.user.is_superuser
