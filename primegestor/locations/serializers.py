from rest_framework import serializers
from .models import Warehouse


class WarehouseSerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'location', 'product_count', 'created_at', 'updated_at']

    def get_product_count(self, obj):
        # Annotated on list queries; fall back to a count for single objects
        if hasattr(obj, 'product_count'):
            return obj.product_count
        return obj.products.count()
