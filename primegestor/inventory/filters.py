import django_filters
from .models import StockBatch, StockMovement


class StockBatchFilter(django_filters.FilterSet):
    """Batches are always listed per product"""

    product_id = django_filters.NumberFilter(field_name='product_id', lookup_expr='exact', required=True)

    class Meta:
        model = StockBatch
        fields = ['product_id']


class StockMovementFilter(django_filters.FilterSet):
    product_id = django_filters.NumberFilter(field_name='product_id', lookup_expr='exact')

    class Meta:
        model = StockMovement
        fields = ['product_id']
