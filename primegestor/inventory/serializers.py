from rest_framework import serializers
from .models import StockBatch, StockMovement
from .services import ADJUST_ADD, ADJUST_REMOVE


class StockBatchSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    supplier_id = serializers.IntegerField(source='purchase.supplier_id', read_only=True)
    supplier_name = serializers.CharField(source='purchase.supplier.name', read_only=True)
    purchase_date = serializers.DateTimeField(source='purchase.purchase_date', read_only=True)
    remaining_value = serializers.SerializerMethodField()

    class Meta:
        model = StockBatch
        fields = [
            'id', 'product', 'product_name', 'purchase', 'purchase_date',
            'supplier_id', 'supplier_name', 'quantity_in', 'quantity_remaining',
            'purchase_price', 'remaining_value', 'batch_date'
        ]

    def get_remaining_value(self, obj):
        return str(obj.get_remaining_value())


class StockMovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    user_name = serializers.CharField(source='user.full_name', read_only=True, allow_null=True)

    class Meta:
        model = StockMovement
        fields = ['id', 'product', 'product_name', 'product_sku', 'quantity', 'type', 'reference', 'user', 'user_name', 'created_at']


class StockAdjustmentSerializer(serializers.Serializer):
    """Manual stock add/remove request"""
    quantity = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(choices=[ADJUST_ADD, ADJUST_REMOVE])
