from django.contrib import admin
from .models import Product, ProductPhoto


class ProductPhotoInline(admin.TabularInline):
    model = ProductPhoto
    extra = 0
    fields = ['file_name', 'content_type', 'uploaded_at']
    readonly_fields = ['file_name', 'content_type', 'uploaded_at']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sku', 'category', 'unit_price', 'quantity', 'warehouse', 'supplier', 'created_at']
    list_filter = ['category', 'warehouse', 'supplier']
    search_fields = ['name', 'sku']
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    inlines = [ProductPhotoInline]


@admin.register(ProductPhoto)
class ProductPhotoAdmin(admin.ModelAdmin):
    list_display = ['file_name', 'product', 'content_type', 'uploaded_at']
    search_fields = ['file_name', 'product__name']
    exclude = ['data']
