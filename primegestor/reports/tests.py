"""
Tests for the dashboard, profit/loss and tabular reports (JSON and Excel)
"""
from datetime import timedelta
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.reports.exports import XLSX_CONTENT_TYPE


class DashboardTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(full_name='Operador')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse(name='Azul')
        self.product = TestDataFactory.create_product(
            name='Caneta', unit_price=Decimal('2.00'), minimum_quantity=5, maximum_quantity=100,
            warehouse=self.warehouse,
        )
        TestDataFactory.create_product(
            name='Caderno', unit_price=Decimal('5.00'), quantity=50, minimum_quantity=5, maximum_quantity=100,
        )
        TestDataFactory.create_purchase(self.product, quantity=10, price=Decimal('1.00'), user=self.user)
        TestDataFactory.create_sale(self.product, quantity=4, price=Decimal('3.00'), user=self.user)

    def test_dashboard_totals(self):
        response = self.client.get('/api/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data
        self.assertEqual(data['total_products'], 2)
        self.assertEqual(data['total_stock_quantity'], 56)
        # 6 x 2.00 + 50 x 5.00
        self.assertEqual(data['total_inventory_value'], '262.00')
        # Caneta: 6 <= 5 + 9.5
        self.assertEqual(data['low_stock_count'], 1)
        self.assertEqual(data['low_stock_products'][0]['name'], 'Caneta')
        self.assertEqual(data['products_by_warehouse'], [{'id': self.warehouse.id, 'name': 'Azul', 'product_count': 1}])
        self.assertEqual(len(data['recent_stock_movements']), 2)
        self.assertEqual(data['total_revenue'], '12.00')
        self.assertEqual(data['total_profit'], '8.00')
        self.assertEqual(len(data['profit_data']), 1)
        self.assertEqual(data['profit_data'][0]['sales'], 4)

    def test_dashboard_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ProfitLossTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(self.product, quantity=20, price=Decimal('5.00'))

    def test_daily_rows_cover_window(self):
        TestDataFactory.create_sale(self.product, quantity=2, price=Decimal('8.00'))
        TestDataFactory.create_sale(self.product, quantity=1, price=Decimal('4.00'),
                                    sale_date=timezone.now() - timedelta(days=3))
        TestDataFactory.create_sale(self.product, quantity=1, price=Decimal('9.00'),
                                    sale_date=timezone.now() - timedelta(days=30))

        response = self.client.get('/api/reports/profit-loss/', {'days': 7})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data['daily_data']
        self.assertEqual(len(rows), 8)
        self.assertEqual(rows[-1]['date'], timezone.localdate().isoformat())
        self.assertEqual(rows[-1]['revenue'], '16.00')
        self.assertEqual(rows[-1]['profit'], '6.00')
        self.assertEqual(rows[-1]['sales'], 1)
        self.assertEqual(rows[-4]['profit'], '-1.00')
        self.assertEqual(response.data['total_revenue'], '20.00')
        self.assertEqual(response.data['total_profit'], '5.00')

    def test_invalid_days(self):
        response = self.client.get('/api/reports/profit-loss/', {'days': '0'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TabularReportTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(full_name='Operador')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_products_report_defaults(self):
        TestDataFactory.create_product(name='Caneta', sku='CAN-1')
        response = self.client.get('/api/reports/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data[0]
        self.assertEqual(row['SKU'], 'CAN-1')
        self.assertEqual(row['Warehouse'], 'N/A')
        self.assertEqual(row['Recorded By'], 'System')

    def test_sales_report_rows(self):
        product = TestDataFactory.create_product(name='Caneta')
        customer = TestDataFactory.create_customer(name='Bruno')
        TestDataFactory.create_purchase(product, quantity=5, price=Decimal('2.00'))
        TestDataFactory.create_sale(product, customer, quantity=2, price=Decimal('5.00'), user=self.user)
        response = self.client.get('/api/reports/sales/')
        row = response.data[0]
        self.assertEqual(row['Customer'], 'Bruno')
        self.assertEqual(row['Revenue'], 10.0)
        self.assertEqual(row['Cost of Goods Sold'], 4.0)
        self.assertEqual(row['Profit/Loss'], 6.0)
        self.assertEqual(row['Recorded By'], 'Operador')

    def test_supplier_and_customer_reports(self):
        TestDataFactory.create_supplier(name='Alfa', contact_person=None, phone=None)
        response = self.client.get('/api/reports/suppliers/')
        self.assertEqual(response.data[0]['Contact Person'], 'N/A')
        TestDataFactory.create_customer(name='Bruno', phone=None)
        response = self.client.get('/api/reports/customers/')
        self.assertEqual(response.data[0]['Phone'], 'N/A')

    def test_users_report(self):
        response = self.client.get('/api/reports/users/')
        self.assertEqual(response.data[0]['Full Name'], 'Operador')

    def test_purchases_report_xlsx_export(self):
        product = TestDataFactory.create_product(name='Caneta')
        TestDataFactory.create_purchase(product, quantity=3, price=Decimal('2.50'))
        response = self.client.get('/api/reports/purchases/', {'export': 'xlsx'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], XLSX_CONTENT_TYPE)
        self.assertIn(f'purchases_{timezone.localdate().isoformat()}.xlsx', response['Content-Disposition'])

        ws = load_workbook(BytesIO(response.content)).active
        header = [cell.value for cell in ws[1]]
        self.assertEqual(header[:3], ['Purchase ID', 'Product', 'SKU'])
        self.assertTrue(ws['A1'].font.bold)
        self.assertEqual(ws.cell(row=2, column=header.index('Total Cost') + 1).value, 7.5)

    def test_unknown_report(self):
        response = self.client.get('/api/reports/invoices/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
