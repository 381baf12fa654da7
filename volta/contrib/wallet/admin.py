"""Wallet admin."""

from django.contrib import admin, messages
from django.utils.html import format_html

from volta.contrib.wallet.models import RetryStatus, WalletRetryItem
from volta.contrib.wallet.retry import RetryQueue


@admin.register(WalletRetryItem)
class WalletRetryItemAdmin(admin.ModelAdmin):
    list_display = [
        "enrollment",
        "status_badge",
        "attempts_display",
        "next_retry_at",
        "last_error",
        "created_at",
    ]
    list_filter = ["status"]
    search_fields = ["enrollment__customer__name", "enrollment__passkit_id", "last_error"]
    raw_id_fields = ["enrollment"]
    readonly_fields = ["attempts", "last_error", "last_attempt_at", "created_at", "updated_at"]
    actions = ["retry_now"]

    def status_badge(self, obj):
        colors = {
            RetryStatus.PENDING: "#ffc107",
            RetryStatus.SUCCEEDED: "#28a745",
            RetryStatus.FAILED: "#dc3545",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.status, "#6c757d"),
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    def attempts_display(self, obj):
        return f"{obj.attempts}/{obj.max_attempts}"

    attempts_display.short_description = "Tentativas"

    @admin.action(description="Tentar novamente agora")
    def retry_now(self, request, queryset):
        succeeded = sum(1 for item in queryset if RetryQueue.retry(item.pk))
        self.message_user(
            request,
            f"{succeeded} de {queryset.count()} atualização(ões) concluída(s).",
            messages.SUCCESS if succeeded else messages.WARNING,
        )
