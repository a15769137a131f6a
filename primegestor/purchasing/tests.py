"""
Tests for the Purchasing module: recording purchases feeds stock batches
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from primegestor.core.models import ActivityLog
from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.inventory.models import StockBatch
from primegestor.purchasing.models import Purchase


class PurchaseModelTests(TestCase):

    def test_total_cost(self):
        product = TestDataFactory.create_product()
        purchase = TestDataFactory.create_purchase(product, quantity=4, price=Decimal('12.50'))
        self.assertEqual(purchase.get_total_cost(), Decimal('50.00'))
        self.assertIn('Purchase-', str(purchase))


class PurchaseAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()
        self.product = TestDataFactory.create_product(quantity=2)

    def test_create_purchase(self):
        response = self.client.post('/api/purchases/', {
            'supplier': self.supplier.id,
            'product': self.product.id,
            'purchased_quantity': 10,
            'purchase_price': '8.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_cost'], '80.00')
        self.assertEqual(response.data['created_by'], self.user.id)

        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 12)
        batch = StockBatch.objects.get(purchase_id=response.data['id'])
        self.assertEqual(batch.quantity_remaining, 10)
        self.assertTrue(ActivityLog.objects.filter(entity_type='PURCHASE', action='CREATE').exists())

    def test_create_purchase_validation(self):
        for payload in (
            {'supplier': self.supplier.id, 'product': self.product.id, 'purchased_quantity': 0, 'purchase_price': '8.00'},
            {'supplier': self.supplier.id, 'product': self.product.id, 'purchased_quantity': 1, 'purchase_price': '0'},
            {'supplier': self.supplier.id, 'product': 9999, 'purchased_quantity': 1, 'purchase_price': '1.00'},
            {'product': self.product.id, 'purchased_quantity': 1, 'purchase_price': '1.00'},
        ):
            response = self.client.post('/api/purchases/', payload, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, payload)
        self.assertEqual(Purchase.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 2)

    def test_list_purchases_by_product(self):
        TestDataFactory.create_purchase(self.product, self.supplier)
        TestDataFactory.create_purchase(TestDataFactory.create_product(), self.supplier)
        response = self.client.get('/api/purchases/', {'product_id': self.product.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['product_name'], self.product.name)
        self.assertEqual(response.data[0]['supplier_name'], self.supplier.name)

    def test_list_rejects_non_numeric_product_id(self):
        response = self.client.get('/api/purchases/', {'product_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product_id', response.data)

    def test_purchase_detail(self):
        purchase = TestDataFactory.create_purchase(self.product, self.supplier)
        response = self.client.get(f'/api/purchases/{purchase.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], purchase.id)
        response = self.client.get('/api/purchases/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
