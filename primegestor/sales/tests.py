from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from primegestor.core.models import ActivityLog
from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.sales.models import Sale


class SaleAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer()
        self.product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(self.product, quantity=5, price=Decimal('4.00'))

    def test_create_sale_computes_cost_and_profit(self):
        response = self.client.post('/api/sales/', {
            'customer': self.customer.id,
            'product': self.product.id,
            'sold_quantity': 3,
            'sale_price': '10.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['cost_of_goods_sold'], '12.00')
        self.assertEqual(response.data['revenue'], '30.00')
        self.assertEqual(response.data['profit'], '18.00')
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 2)
        self.assertTrue(ActivityLog.objects.filter(entity_type='SALE', action='CREATE').exists())

    def test_insufficient_stock_reports_available(self):
        response = self.client.post('/api/sales/', {
            'customer': self.customer.id,
            'product': self.product.id,
            'sold_quantity': 6,
            'sale_price': '10.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['available'], 5)
        self.assertIn('Available: 5', response.data['error'])
        self.assertEqual(Sale.objects.count(), 0)

    def test_unknown_product(self):
        response = self.client.post('/api/sales/', {
            'customer': self.customer.id,
            'product': 9999,
            'sold_quantity': 1,
            'sale_price': '10.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data)

    def test_non_positive_values_rejected(self):
        response = self.client.post('/api/sales/', {
            'customer': self.customer.id,
            'product': self.product.id,
            'sold_quantity': 0,
            'sale_price': '-1.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sold_quantity', response.data)
        self.assertIn('sale_price', response.data)

    def test_list_and_detail(self):
        sale = TestDataFactory.create_sale(self.product, self.customer, quantity=2, price=Decimal('9.00'))
        response = self.client.get('/api/sales/', {'product_id': self.product.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['profit'], '10.00')
        response = self.client.get(f'/api/sales/{sale.id}/')
        self.assertEqual(response.data['customer_name'], self.customer.name)

    def test_list_rejects_non_numeric_product_id(self):
        response = self.client.get('/api/sales/', {'product_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product_id', response.data)
