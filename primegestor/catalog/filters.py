import django_filters
from django.db.models import F, Q
from .models import Product, ProductPhoto


class ProductFilter(django_filters.FilterSet):
    """Filter for the product list using django-filter"""

    # Basic search - searches across name and SKU
    search = django_filters.CharFilter(method='filter_search', label='Search')

    category = django_filters.CharFilter(field_name='category', lookup_expr='iexact')
    warehouse_id = django_filters.NumberFilter(field_name='warehouse_id', lookup_expr='exact')
    supplier_id = django_filters.NumberFilter(field_name='supplier_id', lookup_expr='exact')
    low_stock = django_filters.BooleanFilter(method='filter_low_stock', label='Low Stock')

    class Meta:
        model = Product
        fields = ['search', 'category', 'warehouse_id', 'supplier_id', 'low_stock']

    def filter_search(self, queryset, name, value):
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(Q(name__icontains=search) | Q(sku__icontains=search))

    def filter_low_stock(self, queryset, name, value):
        if value is None:
            return queryset
        # quantity <= min + (max - min) / 10, scaled by 10 to stay in integers
        queryset = queryset.alias(
            scaled_quantity=F('quantity') * 10,
            scaled_threshold=F('minimum_quantity') * 9 + F('maximum_quantity'),
        )
        if value:
            return queryset.filter(scaled_quantity__lte=F('scaled_threshold'))
        return queryset.exclude(scaled_quantity__lte=F('scaled_threshold'))


class ProductPhotoFilter(django_filters.FilterSet):
    """Filter for the photo list; search matches the file name"""

    product_id = django_filters.NumberFilter(field_name='product_id', lookup_expr='exact')
    search = django_filters.CharFilter(method='filter_search', label='Search')

    class Meta:
        model = ProductPhoto
        fields = ['product_id', 'search']

    def filter_search(self, queryset, name, value):
        search = (value or '').strip()
        if not search:
            return queryset
        return queryset.filter(file_name__icontains=search)
