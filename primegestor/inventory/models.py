from django.db import models
from django.utils import timezone
from primegestor.catalog.models import Product
from primegestor.core.models import User


class StockBatch(models.Model):
    """Quantity received from one purchase, consumed oldest-first by sales"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='batches')
    purchase = models.OneToOneField('purchasing.Purchase', on_delete=models.CASCADE, related_name='batch')
    quantity_in = models.PositiveIntegerField()
    quantity_remaining = models.PositiveIntegerField()
    purchase_price = models.DecimalField(max_digits=10, decimal_places=2)
    batch_date = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self):
        return f"Batch {self.id} - {self.product.name} ({self.quantity_remaining}/{self.quantity_in})"

    def get_remaining_value(self):
        return self.quantity_remaining * self.purchase_price

    class Meta:
        db_table = 'stock_batches'
        ordering = ['batch_date', 'id']
        indexes = [
            models.Index(fields=['product', 'batch_date'], name='idx_batch_product_date'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_remaining__lte=models.F('quantity_in')),
                name='batch_remaining_lte_in',
            ),
        ]


class StockMovement(models.Model):
    """Signed stock movements: positive in, negative out"""
    TYPE_IN = 'IN'
    TYPE_OUT = 'OUT'
    TYPE_CHOICES = [
        (TYPE_IN, 'Stock In'),
        (TYPE_OUT, 'Stock Out'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='stock_movements')
    quantity = models.IntegerField()
    type = models.CharField(max_length=3, choices=TYPE_CHOICES)
    reference = models.CharField(max_length=255, blank=True)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='stock_movements')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} {self.quantity} - {self.product.name}"

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', '-created_at'], name='idx_movement_product_created'),
        ]
