from django.test import TestCase
from rest_framework import status

from primegestor.core.models import ActivityLog
from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.locations.models import Warehouse


class WarehouseAPITests(TestCase):
    """Warehouse ("Cor") endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_ordered_by_name_with_product_count(self):
        azul = TestDataFactory.create_warehouse(name='Azul')
        TestDataFactory.create_warehouse(name='Preto')
        TestDataFactory.create_product(warehouse=azul)
        TestDataFactory.create_product(warehouse=azul)

        response = self.client.get('/api/warehouses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([w['name'] for w in response.data], ['Azul', 'Preto'])
        self.assertEqual(response.data[0]['product_count'], 2)
        self.assertEqual(response.data[1]['product_count'], 0)

    def test_create_requires_name(self):
        response = self.client.post('/api/warehouses/', {'location': 'Fundos'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_warehouse(self):
        response = self.client.post('/api/warehouses/', {'name': 'Vermelho', 'location': 'Prateleira 2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['product_count'], 0)
        self.assertTrue(ActivityLog.objects.filter(entity_type='WAREHOUSE', action='CREATE').exists())

    def test_update_warehouse(self):
        warehouse = TestDataFactory.create_warehouse(name='Verde')
        response = self.client.patch(f'/api/warehouses/{warehouse.id}/', {'location': 'Loja'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        warehouse.refresh_from_db()
        self.assertEqual(warehouse.location, 'Loja')

    def test_delete_empty_warehouse(self):
        warehouse = TestDataFactory.create_warehouse()
        response = self.client.delete(f'/api/warehouses/{warehouse.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Warehouse.objects.filter(pk=warehouse.id).exists())

    def test_delete_warehouse_with_products_is_refused(self):
        warehouse = TestDataFactory.create_warehouse()
        TestDataFactory.create_product(warehouse=warehouse)
        response = self.client.delete(f'/api/warehouses/{warehouse.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('1 products', response.data['error'])
        self.assertTrue(Warehouse.objects.filter(pk=warehouse.id).exists())

    def test_missing_warehouse(self):
        response = self.client.get('/api/warehouses/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
