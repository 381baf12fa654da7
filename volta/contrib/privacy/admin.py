"""Privacy admin."""

from django.contrib import admin
from django.utils.html import format_html

from volta.contrib.privacy.models import PrivacyAction, PrivacyAuditLog


@admin.register(PrivacyAuditLog)
class PrivacyAuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action_badge", "customer_reference", "business", "performed_by"]
    list_filter = ["action"]
    search_fields = ["customer_reference", "performed_by"]
    readonly_fields = [
        "business",
        "action",
        "customer_reference",
        "performed_by",
        "reason",
        "details",
        "compliance_notes",
        "created_at",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def action_badge(self, obj):
        colors = {
            PrivacyAction.DATA_EXPORT: "#17a2b8",
            PrivacyAction.DATA_DELETION: "#dc3545",
            PrivacyAction.DATA_ANONYMIZATION: "#6c757d",
            PrivacyAction.CONSENT_UPDATED: "#28a745",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.action, "#6c757d"),
            obj.get_action_display(),
        )

    action_badge.short_description = "Ação"
