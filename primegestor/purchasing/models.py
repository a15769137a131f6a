from django.db import models
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.utils import timezone
from primegestor.catalog.models import Product
from primegestor.parties.models import Supplier
from primegestor.core.models import User


class Purchase(models.Model):
    """Stock bought from a supplier; each purchase opens one stock batch"""
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchases')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='purchases')
    purchased_quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    purchase_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchases')
    purchase_date = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"Purchase-{self.id}"

    def get_total_cost(self):
        return self.purchased_quantity * self.purchase_price

    class Meta:
        db_table = 'purchases'
        ordering = ['-purchase_date', '-id']
        indexes = [
            models.Index(fields=['product', '-purchase_date'], name='idx_purchase_product_date'),
            models.Index(fields=['supplier'], name='idx_purchase_supplier'),
        ]
