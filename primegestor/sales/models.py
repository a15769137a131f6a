from django.db import models
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.utils import timezone
from primegestor.catalog.models import Product
from primegestor.parties.models import Customer
from primegestor.core.models import User


class Sale(models.Model):
    """Product sold to a customer, with the batch cost it consumed"""
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='sales')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='sales')
    sold_quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    sale_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    cost_of_goods_sold = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    sale_date = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"Sale-{self.id}"

    def get_revenue(self):
        return self.sold_quantity * self.sale_price

    def get_profit(self):
        return self.get_revenue() - self.cost_of_goods_sold

    class Meta:
        db_table = 'sales'
        ordering = ['-sale_date', '-id']
        indexes = [
            models.Index(fields=['product', '-sale_date'], name='idx_sale_product_date'),
            models.Index(fields=['-sale_date'], name='idx_sale_date'),
        ]
