from rest_framework import serializers
from .models import Sale


class SaleSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    created_by_name = serializers.CharField(source='created_by.full_name', read_only=True, allow_null=True)
    revenue = serializers.SerializerMethodField()
    profit = serializers.SerializerMethodField()
    sold_quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Sale
        fields = [
            'id', 'customer', 'customer_name', 'product', 'product_name', 'product_sku',
            'sold_quantity', 'sale_price', 'cost_of_goods_sold', 'revenue', 'profit',
            'sale_date', 'created_by', 'created_by_name'
        ]
        read_only_fields = ['cost_of_goods_sold', 'sale_date', 'created_by']

    def get_revenue(self, obj):
        return str(obj.get_revenue())

    def get_profit(self, obj):
        return str(obj.get_profit())
