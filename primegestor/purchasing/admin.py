from django.contrib import admin
from .models import Purchase


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'supplier', 'purchased_quantity', 'purchase_price', 'get_total_cost', 'created_by', 'purchase_date']
    list_filter = ['supplier', 'purchase_date']
    search_fields = ['product__name', 'product__sku', 'supplier__name']
    ordering = ['-purchase_date']
    readonly_fields = ['purchase_date']

    def get_total_cost(self, obj):
        return f"{obj.get_total_cost():.2f}"
    get_total_cost.short_description = 'Total'
