# invoicing/admin.py

from django.contrib import admin

from invoicing.models import Invoice, InvoiceLine, SellerProfile


class InvoiceLineInline(admin.TabularInline):
    model = InvoiceLine
    extra = 0
    can_delete = False
    fields = (
        "line_no",
        "description",
        "quantity",
        "unit_price",
        "discount_amount",
        "taxable_amount",
        "tax_amount",
        "line_total",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Tax records: visible in admin, never edited or deleted from it."""

    list_display = (
        "invoice_number",
        "invoice_date",
        "customer_name",
        "grand_total",
        "total_tax",
        "amount_due",
        "status",
        "zatca_invoice_type",
    )
    list_filter = ("tenant_id", "status", "zatca_invoice_type")
    search_fields = ("invoice_number", "customer_name", "customer_tax_number")
    ordering = ("-invoice_date",)
    inlines = [InvoiceLineInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(SellerProfile)
class SellerProfileAdmin(admin.ModelAdmin):
    list_display = ("tenant_id", "legal_name", "vat_number", "cr_number", "city")
    search_fields = ("tenant_id", "legal_name", "vat_number")
    readonly_fields = ("created_at", "updated_at")
