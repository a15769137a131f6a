"""
Tests for products, manual stock adjustments, stock trend and product photos
"""
from datetime import timedelta
from decimal import Decimal
from io import BytesIO

from PIL import Image
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from primegestor.catalog.models import Product, ProductPhoto
from primegestor.core.models import ActivityLog
from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.inventory.models import StockBatch, StockMovement


def make_image(fmt='PNG', name='photo.png'):
    buffer = BytesIO()
    Image.new('RGB', (8, 8), color=(200, 30, 30)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=f'image/{fmt.lower()}')


class ProductModelTests(TestCase):

    def test_low_stock_threshold(self):
        product = TestDataFactory.create_product(quantity=11, minimum_quantity=10, maximum_quantity=30)
        # 10 + 10% of (30 - 10) = 12
        self.assertEqual(product.get_low_stock_threshold(), Decimal('12'))
        self.assertTrue(product.is_low_stock())
        product.quantity = 13
        self.assertFalse(product.is_low_stock())

    def test_stock_value(self):
        product = TestDataFactory.create_product(quantity=4, unit_price=Decimal('2.50'))
        self.assertEqual(product.get_stock_value(), Decimal('10.00'))


class ProductAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse(name='Azul')
        self.supplier = TestDataFactory.create_supplier(name='Fornecedor A')

    def test_list_returns_count_and_results_newest_first(self):
        first = TestDataFactory.create_product(name='Caneta')
        second = TestDataFactory.create_product(name='Lápis')
        response = self.client.get('/api/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([p['id'] for p in response.data['results']], [second.id, first.id])

    def test_list_filters(self):
        TestDataFactory.create_product(name='Caneta Azul', sku='CAN-001', category='Papelaria',
                                       warehouse=self.warehouse, supplier=self.supplier)
        TestDataFactory.create_product(name='Caderno', sku='CAD-001', category='Cadernos')

        response = self.client.get('/api/products/', {'search': 'can-0'})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/products/', {'category': 'papelaria'})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/products/', {'warehouse_id': self.warehouse.id})
        self.assertEqual(response.data['results'][0]['warehouse_name'], 'Azul')
        response = self.client.get('/api/products/', {'supplier_id': self.supplier.id})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['supplier_name'], 'Fornecedor A')

    def test_low_stock_filter(self):
        # threshold is 10 + 10% of (30 - 10) = 12, inclusive
        low = TestDataFactory.create_product(name='Baixo', quantity=11, minimum_quantity=10, maximum_quantity=30)
        edge = TestDataFactory.create_product(name='Limite', quantity=12, minimum_quantity=10, maximum_quantity=30)
        TestDataFactory.create_product(name='Cheio', quantity=13, minimum_quantity=10, maximum_quantity=30)

        response = self.client.get('/api/products/', {'low_stock': 'true'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({p['id'] for p in response.data['results']}, {low.id, edge.id})
        response = self.client.get('/api/products/', {'low_stock': 'false'})
        self.assertEqual([p['name'] for p in response.data['results']], ['Cheio'])

    def test_create_requires_name_sku_and_price(self):
        response = self.client.post('/api/products/', {'name': 'Sem SKU'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sku', response.data)
        self.assertIn('unit_price', response.data)

    def test_create_product_with_initial_quantity(self):
        response = self.client.post('/api/products/', {
            'name': 'Borracha', 'sku': 'BOR-1', 'unit_price': '1.50', 'quantity': 20,
            'minimum_quantity': 5, 'maximum_quantity': 50, 'warehouse': self.warehouse.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quantity'], 20)
        self.assertEqual(response.data['created_by'], self.user.id)
        product = Product.objects.get(sku='BOR-1')
        self.assertEqual(product.stock_movements.get().quantity, 20)
        self.assertTrue(ActivityLog.objects.filter(entity_type='PRODUCT', action='CREATE').exists())

    def test_create_duplicate_sku_conflict(self):
        TestDataFactory.create_product(sku='DUP-1')
        response = self.client.post('/api/products/', {
            'name': 'Outro', 'sku': 'DUP-1', 'unit_price': '3.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_minimum_above_maximum_rejected(self):
        response = self.client.post('/api/products/', {
            'name': 'X', 'sku': 'X-1', 'unit_price': '1.00', 'minimum_quantity': 10, 'maximum_quantity': 5
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_sku_collision_conflict(self):
        TestDataFactory.create_product(sku='TAKEN')
        product = TestDataFactory.create_product(sku='MINE')
        response = self.client.patch(f'/api/products/{product.id}/', {'sku': 'TAKEN'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_update_quantity_goes_through_stock_service(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(product, quantity=10, price=Decimal('4.00'))

        response = self.client.patch(f'/api/products/{product.id}/', {'quantity': 6, 'name': 'Renomeado'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 6)
        self.assertEqual(response.data['name'], 'Renomeado')
        batch = StockBatch.objects.get(product=product)
        self.assertEqual(batch.quantity_remaining, 6)
        self.assertTrue(StockMovement.objects.filter(product=product, reference='Manual remove', quantity=-4).exists())

    def test_delete_product(self):
        product = TestDataFactory.create_product()
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.id).exists())

    def test_delete_product_with_purchases_conflict(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(product)
        response = self.client.delete(f'/api/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Product.objects.filter(pk=product.id).exists())


class ProductStockAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(quantity=5)

    def test_add_stock(self):
        response = self.client.patch(f'/api/products/{self.product.id}/stock/', {'quantity': 3, 'type': 'add'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 8)
        movement = StockMovement.objects.get(product=self.product)
        self.assertEqual((movement.type, movement.quantity, movement.reference), ('IN', 3, 'Manual add'))

    def test_remove_stock(self):
        response = self.client.patch(f'/api/products/{self.product.id}/stock/', {'quantity': 2, 'type': 'remove'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 3)

    def test_remove_more_than_available(self):
        response = self.client.patch(f'/api/products/{self.product.id}/stock/', {'quantity': 9, 'type': 'remove'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['available'], 5)
        self.product.refresh_from_db()
        self.assertEqual(self.product.quantity, 5)

    def test_invalid_type(self):
        response = self.client.patch(f'/api/products/{self.product.id}/stock/', {'quantity': 1, 'type': 'steal'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stock_trend(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(product, quantity=10, purchase_date=timezone.now() - timedelta(days=40))
        TestDataFactory.create_purchase(product, quantity=5)
        TestDataFactory.create_sale(product, quantity=2)

        response = self.client.get(f'/api/products/{product.id}/stock-trend/', {'days': 7})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 8)
        self.assertEqual(response.data[0]['running_total'], 10)
        today = response.data[-1]
        self.assertEqual(today['date'], timezone.localdate().isoformat())
        self.assertEqual(today['quantity'], 3)
        self.assertEqual(today['type'], 'purchase')
        self.assertEqual(today['running_total'], 13)

    def test_stock_trend_invalid_days(self):
        response = self.client.get(f'/api/products/{self.product.id}/stock-trend/', {'days': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ProductPhotoAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Mochila')

    def test_upload_and_serve_photo(self):
        response = self.client.post('/api/products/photos/', {
            'product_id': self.product.id, 'file': make_image()
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['content_type'], 'image/png')
        self.assertEqual(response.data['product_name'], 'Mochila')

        image = self.client.get(response.data['url'])
        self.assertEqual(image.status_code, status.HTTP_200_OK)
        self.assertEqual(image['Content-Type'], 'image/png')
        self.assertIn('max-age', image['Cache-Control'])
        self.assertTrue(image.content.startswith(b'\x89PNG'))

    def test_upload_rejects_non_image(self):
        bogus = SimpleUploadedFile('notes.png', b'definitely not an image', content_type='image/png')
        response = self.client.post('/api/products/photos/', {
            'product_id': self.product.id, 'file': bogus
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ProductPhoto.objects.count(), 0)

    def test_list_filters(self):
        other = TestDataFactory.create_product()
        ProductPhoto.objects.create(product=self.product, file_name='frente.jpg', data=b'x')
        ProductPhoto.objects.create(product=self.product, file_name='verso.jpg', data=b'x')
        ProductPhoto.objects.create(product=other, file_name='frente.jpg', data=b'x')

        response = self.client.get('/api/products/photos/', {'product_id': self.product.id})
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/products/photos/', {'product_id': self.product.id, 'search': 'verso'})
        self.assertEqual([p['file_name'] for p in response.data], ['verso.jpg'])

    def test_list_rejects_non_numeric_product_id(self):
        response = self.client.get('/api/products/photos/', {'product_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_photo(self):
        photo = ProductPhoto.objects.create(product=self.product, file_name='a.jpg', data=b'x')
        response = self.client.delete(f'/api/products/photos/{photo.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ProductPhoto.objects.filter(pk=photo.id).exists())

    def test_missing_image(self):
        response = self.client.get('/api/products/photos/9999/image/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
