"""
Stock services: purchases feed batches, sales and manual removals drain them
oldest-first. Every mutation runs with the product row locked.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from primegestor.catalog.models import Product
from primegestor.purchasing.models import Purchase
from primegestor.sales.models import Sale
from .models import StockBatch, StockMovement

logger = logging.getLogger('primegestor.inventory')

ADJUST_ADD = 'add'
ADJUST_REMOVE = 'remove'


class StockError(Exception):
    """Base class for rejected stock operations"""


class InsufficientStock(StockError):
    def __init__(self, product, requested):
        self.product = product
        self.requested = requested
        self.available = product.quantity
        super().__init__(
            f'Insufficient stock for {product.name}. Available: {product.quantity}, requested: {requested}'
        )


class InvalidStockOperation(StockError):
    pass


def _lock_product(product):
    return Product.objects.select_for_update().get(pk=product.pk)


def consume_batches(product, quantity):
    """
    Take `quantity` units from the product's batches, oldest first, and
    return their total purchase cost. Units with no batch behind them cost 0.
    Must be called inside a transaction.
    """
    remaining = quantity
    total_cost = Decimal('0.00')
    batches = (
        StockBatch.objects.select_for_update()
        .filter(product_id=product.pk, quantity_remaining__gt=0)
        .order_by('batch_date', 'id')
    )
    for batch in batches:
        if remaining <= 0:
            break
        taken = min(remaining, batch.quantity_remaining)
        batch.quantity_remaining -= taken
        batch.save(update_fields=['quantity_remaining'])
        total_cost += taken * batch.purchase_price
        remaining -= taken

    if remaining > 0:
        logger.info(f"{remaining} unit(s) of product {product.pk} had no batch cost")
    return total_cost


def receive_purchase(purchase, user=None):
    """Book a saved purchase into stock: quantity, batch and movement"""
    with transaction.atomic():
        product = _lock_product(purchase.product)
        product.quantity += purchase.purchased_quantity
        product.save(update_fields=['quantity', 'updated_at'])

        batch = StockBatch.objects.create(
            product=product,
            purchase=purchase,
            quantity_in=purchase.purchased_quantity,
            quantity_remaining=purchase.purchased_quantity,
            purchase_price=purchase.purchase_price,
            batch_date=purchase.purchase_date,
        )
        StockMovement.objects.create(
            product=product,
            quantity=purchase.purchased_quantity,
            type=StockMovement.TYPE_IN,
            reference=f'Purchase #{purchase.id}',
            user=user,
        )
    purchase.product = product
    logger.info(f"Purchase {purchase.id} received: +{purchase.purchased_quantity} of product {product.pk}")
    return batch


def record_purchase(purchase_data, user=None):
    """Create a purchase and receive it in the same transaction"""
    with transaction.atomic():
        purchase = Purchase.objects.create(created_by=user, **purchase_data)
        receive_purchase(purchase, user)
    return purchase


def record_sale(sale_data, user=None):
    """
    Create a sale from validated data. The cost of goods sold comes from the
    batches consumed; the product quantity drops by the full sold quantity.
    """
    sold_quantity = sale_data['sold_quantity']
    with transaction.atomic():
        product = _lock_product(sale_data['product'])
        if product.quantity < sold_quantity:
            raise InsufficientStock(product, sold_quantity)

        cost_of_goods_sold = consume_batches(product, sold_quantity)
        product.quantity -= sold_quantity
        product.save(update_fields=['quantity', 'updated_at'])

        sale = Sale.objects.create(
            **dict(sale_data, product=product),
            cost_of_goods_sold=cost_of_goods_sold,
            created_by=user,
        )
        StockMovement.objects.create(
            product=product,
            quantity=-sold_quantity,
            type=StockMovement.TYPE_OUT,
            reference=f'Sale #{sale.id}',
            user=user,
        )
    logger.info(f"Sale {sale.id} recorded: -{sold_quantity} of product {product.pk}, COGS {cost_of_goods_sold}")
    return sale


def adjust_stock(product, quantity, adjustment_type, user=None):
    """Manual stock add/remove outside purchases and sales"""
    if adjustment_type not in (ADJUST_ADD, ADJUST_REMOVE):
        raise InvalidStockOperation('Invalid type. Use "add" or "remove"')
    if quantity <= 0:
        raise InvalidStockOperation('Quantity must be greater than zero')

    with transaction.atomic():
        locked = _lock_product(product)
        if adjustment_type == ADJUST_ADD:
            locked.quantity += quantity
            movement_quantity = quantity
            movement_type = StockMovement.TYPE_IN
            reference = 'Manual add'
        else:
            if locked.quantity < quantity:
                raise InsufficientStock(locked, quantity)
            # Removed units leave their batches too; their cost is dropped
            consume_batches(locked, quantity)
            locked.quantity -= quantity
            movement_quantity = -quantity
            movement_type = StockMovement.TYPE_OUT
            reference = 'Manual remove'

        locked.save(update_fields=['quantity', 'updated_at'])
        StockMovement.objects.create(
            product=locked,
            quantity=movement_quantity,
            type=movement_type,
            reference=reference,
            user=user,
        )
    logger.info(f"Stock of product {locked.pk} adjusted ({adjustment_type} {quantity}) -> {locked.quantity}")
    return locked


def set_stock_level(product, new_quantity, user=None):
    """Move the product to an absolute quantity via add/remove adjustments"""
    with transaction.atomic():
        # The difference is taken from the locked row, not the caller's copy
        locked = _lock_product(product)
        difference = new_quantity - locked.quantity
        if difference > 0:
            return adjust_stock(locked, difference, ADJUST_ADD, user)
        if difference < 0:
            return adjust_stock(locked, -difference, ADJUST_REMOVE, user)
        return locked


def stock_trend(product, days=30):
    """
    Daily net purchases minus sales for the last `days` days (today
    included), with a running total seeded from everything before the window.
    """
    today = timezone.localdate()
    start_date = today - timedelta(days=days)

    purchases = Purchase.objects.filter(product_id=product.pk)
    sales = Sale.objects.filter(product_id=product.pk)

    purchased_before = purchases.filter(purchase_date__date__lt=start_date).aggregate(
        total=Sum('purchased_quantity'))['total'] or 0
    sold_before = sales.filter(sale_date__date__lt=start_date).aggregate(
        total=Sum('sold_quantity'))['total'] or 0

    daily = {}
    for purchase in purchases.filter(purchase_date__date__gte=start_date):
        day = daily.setdefault(timezone.localdate(purchase.purchase_date), {'purchases': 0, 'sales': 0})
        day['purchases'] += purchase.purchased_quantity
    for sale in sales.filter(sale_date__date__gte=start_date):
        day = daily.setdefault(timezone.localdate(sale.sale_date), {'purchases': 0, 'sales': 0})
        day['sales'] += sale.sold_quantity

    running_total = purchased_before - sold_before
    points = []
    for offset in range(days + 1):
        date = start_date + timedelta(days=offset)
        day = daily.get(date)
        net = day['purchases'] - day['sales'] if day else 0
        running_total += net
        points.append({
            'date': date.isoformat(),
            'quantity': net,
            'type': 'purchase' if not day or day['purchases'] > day['sales'] else 'sale',
            'running_total': running_total,
        })
    return points
