# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.expense import Expense
from accounting.models.fiscal_period import FiscalPeriod
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.models.sequence import DocumentSequence
from accounting.models.vendor import Vendor


class ReadOnlyAdminMixin:
    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "account_number",
        "name_ar",
        "name_en",
        "account_type",
        "level",
        "current_balance",
        "is_system_account",
        "is_active",
    )
    list_filter = ("tenant_id", "account_type", "is_active", "is_system_account")
    search_fields = ("account_number", "name_ar", "name_en")
    ordering = ("tenant_id", "account_number")
    readonly_fields = ("level", "path", "current_balance", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("tenant_id", "account_number", "name_ar", "name_en", "account_type", "normal_balance"),
            },
        ),
        (
            "Hierarchy",
            {
                "fields": ("parent", "level", "path"),
            },
        ),
        (
            "Balances",
            {
                "fields": ("opening_balance", "current_balance"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active", "is_bank_account", "is_system_account", "description"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return self.readonly_fields + ("opening_balance",)

    def save_model(self, request, obj, form, change):
        if not change:
            obj.current_balance = obj.opening_balance
        super().save_model(request, obj, form, change)


# ============================================================
# JOURNAL ENTRY (READ-ONLY)
# ============================================================


class JournalLineInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = JournalLine
    extra = 0
    fields = ("line_no", "account_number", "account_name", "debit", "credit", "description", "branch_id")
    readonly_fields = fields


@admin.register(JournalEntry)
class JournalEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "entry_number",
        "entry_date",
        "description",
        "total_debit",
        "total_credit",
        "status",
        "reference_type",
        "reference_id",
    )
    list_filter = ("tenant_id", "status", "reference_type", "is_auto_posted")
    search_fields = ("entry_number", "description", "reference_id")
    ordering = ("-entry_date", "-created_at")
    inlines = [JournalLineInline]


# ============================================================
# PERIODS / SEQUENCES
# ============================================================


@admin.register(FiscalPeriod)
class FiscalPeriodAdmin(admin.ModelAdmin):
    list_display = ("name", "tenant_id", "start_date", "end_date", "status", "locked_by", "locked_at")
    list_filter = ("tenant_id", "status")
    readonly_fields = ("status", "locked_by", "locked_at", "created_at", "updated_at")
    ordering = ("tenant_id", "-start_date")


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("tenant_id", "branch_id", "kind", "year", "last_value")
    list_filter = ("kind", "year")


# ============================================================
# EXPENSES / VENDORS
# ============================================================


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("code", "name_ar", "name_en", "tax_number", "current_balance", "is_active")
    list_filter = ("tenant_id", "is_active")
    search_fields = ("code", "name_ar", "name_en", "tax_number")
    readonly_fields = ("current_balance", "created_at", "updated_at")


@admin.register(Expense)
class ExpenseAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "expense_number",
        "expense_date",
        "description",
        "total_amount",
        "payment_method",
        "status",
        "journal_entry",
    )
    list_filter = ("tenant_id", "status", "payment_method")
    search_fields = ("expense_number", "description", "vendor_name")
