"""
Tests for the FIFO stock services and the stock batch / movement endpoints
"""
from datetime import timedelta
from decimal import Decimal

from django.db.models import Sum
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.inventory.models import StockBatch, StockMovement
from primegestor.inventory.services import (
    adjust_stock, consume_batches, set_stock_level, record_sale,
    InsufficientStock, InvalidStockOperation
)


class StockServiceTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.supplier = TestDataFactory.create_supplier()
        self.customer = TestDataFactory.create_customer()
        self.product = TestDataFactory.create_product()
        now = timezone.now()
        self.old = TestDataFactory.create_purchase(self.product, self.supplier, quantity=10, price=Decimal('5.00'),
                                                   purchase_date=now - timedelta(days=2))
        self.new = TestDataFactory.create_purchase(self.product, self.supplier, quantity=10, price=Decimal('7.00'),
                                                   purchase_date=now - timedelta(days=1))
        self.product.refresh_from_db()

    def _sell(self, quantity, price=Decimal('10.00')):
        return record_sale({
            'customer': self.customer,
            'product': self.product,
            'sold_quantity': quantity,
            'sale_price': price,
        }, self.user)

    def _remaining(self):
        return StockBatch.objects.filter(product=self.product).aggregate(total=Sum('quantity_remaining'))['total']

    def test_purchase_opens_batch_and_movement(self):
        self.assertEqual(self.product.quantity, 20)
        batch = self.old.batch
        self.assertEqual((batch.quantity_in, batch.quantity_remaining), (10, 10))
        self.assertEqual(batch.purchase_price, Decimal('5.00'))
        self.assertTrue(StockMovement.objects.filter(reference=f'Purchase #{self.old.id}', quantity=10, type='IN').exists())

    def test_sale_consumes_oldest_batch_first(self):
        sale = self._sell(12)
        # 10 x 5.00 from the old batch, 2 x 7.00 from the new one
        self.assertEqual(sale.cost_of_goods_sold, Decimal('64.00'))
        self.assertEqual(sale.get_revenue(), Decimal('120.00'))
        self.assertEqual(sale.get_profit(), Decimal('56.00'))
        self.old.batch.refresh_from_db()
        self.new.batch.refresh_from_db()
        self.assertEqual(self.old.batch.quantity_remaining, 0)
        self.assertEqual(self.new.batch.quantity_remaining, 8)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 8)
        movement = StockMovement.objects.get(reference=f'Sale #{sale.id}')
        self.assertEqual((movement.type, movement.quantity), ('OUT', -12))

    def test_sale_exactly_exhausting_a_batch(self):
        sale = self._sell(10)
        self.assertEqual(sale.cost_of_goods_sold, Decimal('50.00'))
        self.new.batch.refresh_from_db()
        self.assertEqual(self.new.batch.quantity_remaining, 10)

    def test_insufficient_stock_leaves_everything_untouched(self):
        with self.assertRaises(InsufficientStock) as ctx:
            self._sell(21)
        self.assertEqual(ctx.exception.available, 20)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 20)
        self.assertEqual(self._remaining(), 20)

    def test_units_without_batches_cost_nothing(self):
        adjust_stock(self.product, 5, 'add', self.user)
        sale = self._sell(25)
        self.assertEqual(sale.cost_of_goods_sold, Decimal('120.00'))
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 0)
        self.assertEqual(self._remaining(), 0)

    def test_batches_never_exceed_product_quantity(self):
        adjust_stock(self.product, 4, 'remove', self.user)
        self._sell(3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 13)
        self.assertLessEqual(self._remaining(), self.product.quantity)

    def test_consume_batches_returns_cost(self):
        self.assertEqual(consume_batches(self.product, 11), Decimal('57.00'))

    def test_invalid_adjustment_type(self):
        with self.assertRaises(InvalidStockOperation):
            adjust_stock(self.product, 1, 'steal', self.user)

    def test_non_positive_adjustment(self):
        with self.assertRaises(InvalidStockOperation):
            adjust_stock(self.product, 0, 'add', self.user)

    def test_set_stock_level(self):
        product = set_stock_level(self.product, 25, self.user)
        self.assertEqual(product.quantity, 25)
        product = set_stock_level(product, 5, self.user)
        self.assertEqual(product.quantity, 5)
        # Removals drain batches first, oldest to newest
        self.assertEqual(self._remaining(), 0)
        self.assertEqual(set_stock_level(product, 5, self.user).quantity, 5)

    def test_set_stock_level_reads_current_quantity(self):
        stale = self.product
        self._sell(3)
        self.assertEqual(stale.quantity, 20)

        product = set_stock_level(stale, 15, self.user)
        self.assertEqual(product.quantity, 15)
        self.assertEqual(self._remaining(), 15)
        self.assertTrue(StockMovement.objects.filter(product=product, reference='Manual remove', quantity=-2).exists())


class StockEndpointTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier(name='Atacado Centro')
        self.product = TestDataFactory.create_product()

    def test_stock_batches_require_product_id(self):
        response = self.client.get('/api/stock-batches/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_numeric_product_id_rejected(self):
        for url in ('/api/stock-batches/', '/api/stock-movements/'):
            response = self.client.get(url, {'product_id': 'abc'})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, url)
            self.assertIn('product_id', response.data)

    def test_stock_batches_newest_first_with_supplier(self):
        now = timezone.now()
        TestDataFactory.create_purchase(self.product, self.supplier, quantity=3, purchase_date=now - timedelta(days=3))
        newest = TestDataFactory.create_purchase(self.product, self.supplier, quantity=4, purchase_date=now)
        response = self.client.get('/api/stock-batches/', {'product_id': self.product.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(response.data[0]['purchase'], newest.id)
        self.assertEqual(response.data[0]['supplier_name'], 'Atacado Centro')

    def test_stock_movements(self):
        TestDataFactory.create_purchase(self.product, self.supplier, quantity=3)
        other = TestDataFactory.create_product()
        TestDataFactory.create_purchase(other, self.supplier, quantity=1)
        response = self.client.get('/api/stock-movements/', {'product_id': self.product.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['quantity'], 3)
        response = self.client.get('/api/stock-movements/')
        self.assertEqual(len(response.data), 2)
