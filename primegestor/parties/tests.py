from django.test import TestCase
from rest_framework import status

from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.parties.models import Customer, Supplier


class CustomerAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_ordered_by_name(self):
        TestDataFactory.create_customer(name='Zélia')
        TestDataFactory.create_customer(name='Bruno')
        response = self.client.get('/api/customers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Bruno', 'Zélia'])

    def test_search(self):
        TestDataFactory.create_customer(name='Bruno', phone='111')
        TestDataFactory.create_customer(name='Carla', phone='222')
        response = self.client.get('/api/customers/', {'search': '222'})
        self.assertEqual([c['name'] for c in response.data], ['Carla'])

    def test_create_requires_name(self):
        response = self.client.post('/api/customers/', {'phone': '123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_update_delete(self):
        response = self.client.post('/api/customers/', {'name': 'Diego', 'email': 'diego@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        customer_id = response.data['id']

        response = self.client.put(f'/api/customers/{customer_id}/', {'name': 'Diego Souza'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Diego Souza')

        response = self.client.delete(f'/api/customers/{customer_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Customer.objects.filter(pk=customer_id).exists())

    def test_delete_customer_with_sales_is_refused(self):
        customer = TestDataFactory.create_customer()
        product = TestDataFactory.create_product(quantity=5)
        TestDataFactory.create_sale(product, customer=customer, quantity=1)
        response = self.client.delete(f'/api/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Customer.objects.filter(pk=customer.id).exists())


class SupplierAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        response = self.client.post('/api/suppliers/', {
            'name': 'Distribuidora Sul', 'contact_person': 'Paulo', 'phone': '5555'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['contact_person'], 'Paulo')

    def test_search_by_contact_person(self):
        TestDataFactory.create_supplier(name='Alfa', contact_person='Paulo')
        TestDataFactory.create_supplier(name='Beta', contact_person='Rita')
        response = self.client.get('/api/suppliers/', {'search': 'rita'})
        self.assertEqual([s['name'] for s in response.data], ['Beta'])

    def test_delete_supplier_with_purchases_is_refused(self):
        supplier = TestDataFactory.create_supplier()
        product = TestDataFactory.create_product()
        TestDataFactory.create_purchase(product, supplier=supplier)
        response = self.client.delete(f'/api/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Supplier.objects.filter(pk=supplier.id).exists())

    def test_delete_supplier_clears_product_link(self):
        supplier = TestDataFactory.create_supplier()
        product = TestDataFactory.create_product(supplier=supplier)
        response = self.client.delete(f'/api/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        product.refresh_from_db()
        self.assertIsNone(product.supplier)
