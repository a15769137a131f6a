from django.db import models
from decimal import Decimal
from django.core.validators import MinValueValidator
from primegestor.core.models import User
from primegestor.locations.models import Warehouse
from primegestor.parties.models import Supplier


class Product(models.Model):
    """Product master"""
    name = models.CharField(max_length=200, db_index=True)
    sku = models.CharField(max_length=100, unique=True, db_index=True)
    category = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    quantity = models.PositiveIntegerField(default=0)
    minimum_quantity = models.PositiveIntegerField(default=0)
    maximum_quantity = models.PositiveIntegerField(default=0)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def get_low_stock_threshold(self):
        """Minimum plus 10% of the min/max band"""
        band = Decimal(self.maximum_quantity - self.minimum_quantity) * Decimal('0.10')
        return Decimal(self.minimum_quantity) + band

    def is_low_stock(self):
        return Decimal(self.quantity) <= self.get_low_stock_threshold()

    def get_stock_value(self):
        return self.quantity * self.unit_price

    class Meta:
        db_table = 'products'
        ordering = ['-id']


class ProductPhoto(models.Model):
    """Product photos stored in the database"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='photos')
    file_name = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, default='image/jpeg')
    data = models.BinaryField()
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.file_name

    class Meta:
        db_table = 'product_photos'
        ordering = ['-uploaded_at', '-id']
