# sales/admin.py

from django.contrib import admin

from sales.models.order import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("name", "quantity", "unit_price")
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "tenant_id",
        "branch_id",
        "status",
        "total_amount",
        "cost_of_goods",
        "payment_method",
        "created_at",
    )
    search_fields = ("order_number", "customer_name", "customer_phone")
    list_filter = ("status", "payment_method", "tenant_id")
    readonly_fields = ("created_at",)
    inlines = [OrderItemInline]
