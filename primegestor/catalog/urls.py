from django.urls import path
from .views import (
    product_list_create, product_detail, product_stock, product_stock_trend,
    photo_list_create, photo_delete, photo_image
)

urlpatterns = [
    path('products/photos/', photo_list_create, name='product-photo-list-create'),
    path('products/photos/<int:pk>/', photo_delete, name='product-photo-delete'),
    path('products/photos/<int:pk>/image/', photo_image, name='product-photo-image'),

    path('products/', product_list_create, name='product-list-create'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
    path('products/<int:pk>/stock/', product_stock, name='product-stock'),
    path('products/<int:pk>/stock-trend/', product_stock_trend, name='product-stock-trend'),
]
