import django_filters
from .models import Purchase


class PurchaseFilter(django_filters.FilterSet):
    product_id = django_filters.NumberFilter(field_name='product_id', lookup_expr='exact')

    class Meta:
        model = Purchase
        fields = ['product_id']
