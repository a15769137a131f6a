from django.contrib import admin
from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'customer', 'sold_quantity', 'sale_price', 'cost_of_goods_sold', 'get_profit', 'sale_date']
    list_filter = ['sale_date']
    search_fields = ['product__name', 'product__sku', 'customer__name']
    ordering = ['-sale_date']
    readonly_fields = ['cost_of_goods_sold', 'sale_date']

    def get_profit(self, obj):
        return f"{obj.get_profit():.2f}"
    get_profit.short_description = 'Profit'
