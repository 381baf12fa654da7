"""Volta admin (CORE only).

Contrib models have their own admin in their respective modules:
- volta.contrib.wallet.admin: WalletRetryItemAdmin
- volta.contrib.privacy.admin: PrivacyAuditLogAdmin
"""

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from volta.models import (
    Business,
    Campaign,
    Customer,
    CustomerLoyaltyCard,
    EnrollmentStatusChoices,
    LoyaltyCard,
    StampTransaction,
)


# ===========================================
# Business Admin
# ===========================================


class LoyaltyCardInline(admin.TabularInline):
    model = LoyaltyCard
    extra = 0
    fields = ["name", "is_active", "wallet_enabled"]
    show_change_link = True


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "phone", "customer_count", "created_at"]
    search_fields = ["name", "email"]
    readonly_fields = ["id", "created_at"]
    inlines = [LoyaltyCardInline]

    fieldsets = [
        (None, {"fields": ["id", "name", "email", "phone", "address", "logo_url"]}),
        ("Configurações", {"fields": ["settings"], "classes": ["collapse"]}),
        ("Timestamps", {"fields": ["created_at"], "classes": ["collapse"]}),
    ]

    def customer_count(self, obj):
        return obj.customers.count()

    customer_count.short_description = "Clientes"


# ===========================================
# LoyaltyCard Admin
# ===========================================


@admin.register(LoyaltyCard)
class LoyaltyCardAdmin(admin.ModelAdmin):
    list_display = ["name", "business", "stamps_required", "is_active", "wallet_enabled"]
    list_filter = ["is_active", "wallet_enabled"]
    search_fields = ["name", "business__name"]
    list_editable = ["is_active"]
    raw_id_fields = ["business"]
    readonly_fields = ["id", "created_at"]

    fieldsets = [
        (None, {"fields": ["id", "business", "name", "description"]}),
        ("Regras", {"fields": ["rules", "is_active", "wallet_enabled"]}),
        ("Aparência", {"fields": ["design", "enrollment_form"], "classes": ["collapse"]}),
        ("Timestamps", {"fields": ["created_at"], "classes": ["collapse"]}),
    ]

    def stamps_required(self, obj):
        return obj.card_rules.stamps_required

    stamps_required.short_description = "Selos"


# ===========================================
# Customer Admin
# ===========================================


class EnrollmentInline(admin.TabularInline):
    model = CustomerLoyaltyCard
    extra = 0
    fields = ["loyalty_card", "current_stamps", "status", "total_redeemed"]
    readonly_fields = ["current_stamps", "status", "total_redeemed"]
    show_change_link = True


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["name", "phone", "business", "total_visits", "last_visit", "consent_badge"]
    list_filter = ["business"]
    search_fields = ["name", "phone", "email"]
    raw_id_fields = ["business"]
    readonly_fields = ["id", "enrollment_date", "created_at", "updated_at"]
    inlines = [EnrollmentInline]

    fieldsets = [
        (None, {"fields": ["id", "business", "name", "phone", "email"]}),
        ("Visitas", {"fields": ["enrollment_date", "total_visits", "total_spent", "last_visit"]}),
        ("Dados", {"fields": ["tags", "custom_fields", "consent"], "classes": ["collapse"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def consent_badge(self, obj):
        if obj.has_lgpd_consent:
            return format_html('<span style="color: green;">LGPD</span>')
        return format_html('<span style="color: gray;">-</span>')

    consent_badge.short_description = "Consentimento"


# ===========================================
# CustomerLoyaltyCard Admin
# ===========================================


@admin.register(CustomerLoyaltyCard)
class CustomerLoyaltyCardAdmin(admin.ModelAdmin):
    list_display = [
        "customer_link",
        "loyalty_card",
        "progress_display",
        "status_badge",
        "total_redeemed",
        "has_wallet_pass",
    ]
    list_filter = ["status", "loyalty_card__business"]
    search_fields = ["customer__name", "customer__phone", "loyalty_card__name", "passkit_id"]
    raw_id_fields = ["customer", "loyalty_card"]
    readonly_fields = [
        "id",
        "current_stamps",
        "status",
        "total_redeemed",
        "qr_code",
        "created_at",
        "updated_at",
    ]

    fieldsets = [
        (None, {"fields": ["id", "customer", "loyalty_card", "qr_code"]}),
        ("Progresso", {"fields": ["current_stamps", "status", "total_redeemed"]}),
        (
            "Carteira digital",
            {"fields": ["passkit_id", "wallet_pass_url", "google_pay_url"], "classes": ["collapse"]},
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def customer_link(self, obj):
        url = reverse("admin:volta_customer_change", args=[obj.customer.pk])
        return format_html('<a href="{}">{}</a>', url, obj.customer.name)

    customer_link.short_description = "Cliente"

    def progress_display(self, obj):
        return format_html(
            '<progress value="{}" max="100" style="width: 80px;"></progress> {}/{}',
            obj.progress_percent,
            obj.current_stamps,
            obj.stamps_required,
        )

    progress_display.short_description = "Progresso"

    def status_badge(self, obj):
        colors = {
            EnrollmentStatusChoices.ACTIVE: "#17a2b8",
            EnrollmentStatusChoices.COMPLETED: "#28a745",
            EnrollmentStatusChoices.EXPIRED: "#6c757d",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.status, "#6c757d"),
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"

    def has_wallet_pass(self, obj):
        return obj.has_wallet_pass

    has_wallet_pass.boolean = True
    has_wallet_pass.short_description = "Wallet"


# ===========================================
# StampTransaction Admin
# ===========================================


@admin.register(StampTransaction)
class StampTransactionAdmin(admin.ModelAdmin):
    list_display = ["enrollment", "stamps_added", "transaction_type", "created_by", "created_at"]
    list_filter = ["transaction_type"]
    search_fields = ["enrollment__customer__name", "notes", "created_by"]
    readonly_fields = [
        "enrollment",
        "stamps_added",
        "transaction_type",
        "notes",
        "created_by",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# ===========================================
# Campaign Admin
# ===========================================


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ["name", "business", "type", "status", "created_at"]
    list_filter = ["type", "status"]
    search_fields = ["name", "business__name"]
    raw_id_fields = ["business"]
    readonly_fields = ["created_at"]
