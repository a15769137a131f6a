import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError
from django.urls import reverse
from rest_framework import serializers

from .models import Product, ProductPhoto

logger = logging.getLogger('primegestor.catalog')

MAX_PHOTO_SIZE = 5 * 1024 * 1024


class ProductSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, allow_null=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True, allow_null=True)
    created_by_name = serializers.CharField(source='created_by.full_name', read_only=True, allow_null=True)
    is_low_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'category', 'unit_price', 'quantity',
            'minimum_quantity', 'maximum_quantity', 'is_low_stock',
            'warehouse', 'warehouse_name', 'supplier', 'supplier_name',
            'created_by', 'created_by_name', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']
        # Duplicate SKUs are answered with 409 by the views
        extra_kwargs = {'sku': {'validators': []}}

    def get_is_low_stock(self, obj):
        return obj.is_low_stock()

    def validate(self, attrs):
        minimum = attrs.get('minimum_quantity', getattr(self.instance, 'minimum_quantity', 0))
        maximum = attrs.get('maximum_quantity', getattr(self.instance, 'maximum_quantity', 0))
        if maximum and minimum > maximum:
            raise serializers.ValidationError({'maximum_quantity': 'Maximum quantity must not be lower than minimum quantity.'})
        return attrs


class ProductPhotoSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    url = serializers.SerializerMethodField()

    class Meta:
        model = ProductPhoto
        fields = ['id', 'product', 'product_name', 'file_name', 'content_type', 'url', 'uploaded_at']

    def get_url(self, obj):
        return reverse('product-photo-image', kwargs={'pk': obj.pk})


class ProductPhotoUploadSerializer(serializers.Serializer):
    """Multipart upload of a single product photo"""
    product_id = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all(), source='product')
    file = serializers.FileField()

    def validate_file(self, value):
        if value.size > MAX_PHOTO_SIZE:
            raise serializers.ValidationError('Image must be 5 MB or smaller.')
        content = value.read()
        try:
            with Image.open(BytesIO(content)) as image:
                image.verify()
                image_format = image.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.warning(f"Rejected product photo {value.name}: {str(e)}")
            raise serializers.ValidationError('Upload a valid image.')
        value.seek(0)
        value.image_content = content
        value.image_content_type = Image.MIME.get(image_format, 'application/octet-stream')
        return value

    def create(self, validated_data):
        upload = validated_data['file']
        return ProductPhoto.objects.create(
            product=validated_data['product'],
            file_name=upload.name,
            content_type=upload.image_content_type,
            data=upload.image_content,
        )
