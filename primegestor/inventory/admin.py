from django.contrib import admin
from .models import StockBatch, StockMovement


@admin.register(StockBatch)
class StockBatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'purchase', 'quantity_in', 'quantity_remaining', 'purchase_price', 'batch_date']
    list_filter = ['batch_date']
    search_fields = ['product__name', 'product__sku']
    readonly_fields = ['purchase', 'quantity_in', 'batch_date']
    ordering = ['-batch_date']


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ['product', 'type', 'quantity', 'reference', 'user', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['product__name', 'product__sku', 'reference']
    readonly_fields = ['created_at']
    ordering = ['-created_at']
