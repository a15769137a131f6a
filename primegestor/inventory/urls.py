from django.urls import path
from .views import stock_batch_list, stock_movement_list

urlpatterns = [
    path('stock-batches/', stock_batch_list, name='stock-batch-list'),
    path('stock-movements/', stock_movement_list, name='stock-movement-list'),
]
