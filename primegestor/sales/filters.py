import django_filters
from .models import Sale


class SaleFilter(django_filters.FilterSet):
    product_id = django_filters.NumberFilter(field_name='product_id', lookup_expr='exact')

    class Meta:
        model = Sale
        fields = ['product_id']
