from rest_framework import serializers
from .models import Purchase


class PurchaseSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    created_by_name = serializers.CharField(source='created_by.full_name', read_only=True, allow_null=True)
    total_cost = serializers.SerializerMethodField()
    purchased_quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Purchase
        fields = [
            'id', 'supplier', 'supplier_name', 'product', 'product_name', 'product_sku',
            'purchased_quantity', 'purchase_price', 'total_cost', 'purchase_date',
            'created_by', 'created_by_name'
        ]
        read_only_fields = ['purchase_date', 'created_by']

    def get_total_cost(self, obj):
        return str(obj.get_total_cost())
