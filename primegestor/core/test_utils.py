"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from primegestor.locations.models import Warehouse
from primegestor.catalog.models import Product
from primegestor.parties.models import Customer, Supplier
from primegestor.inventory.services import record_purchase, record_sale
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', full_name=None, role='employee', is_active=True):
        """Create a test user"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            full_name=full_name or f'User {TestDataFactory.random_string(4)}',
            role=role,
            is_active=is_active,
        )

    @staticmethod
    def create_admin(email=None, password='testpass123'):
        """Create a user with the admin role"""
        return TestDataFactory.create_user(email=email, password=password, full_name='Admin User', role='admin')

    @staticmethod
    def create_warehouse(name=None, location=None):
        """Create a test warehouse"""
        if not name:
            name = f'Cor_{TestDataFactory.random_string(6)}'
        return Warehouse.objects.create(name=name, location=location)

    @staticmethod
    def create_supplier(name=None, contact_person='Contact', phone='1234567890', email=None):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            name=name,
            contact_person=contact_person,
            phone=phone,
            email=email or f'{name.lower()}@supplier.com',
        )

    @staticmethod
    def create_customer(name=None, phone='9876543210', email=None):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(name=name, phone=phone, email=email)

    @staticmethod
    def create_product(name=None, sku=None, unit_price=Decimal('100.00'), quantity=0,
                       minimum_quantity=0, maximum_quantity=0, category=None,
                       warehouse=None, supplier=None, user=None):
        """Create a test product (quantity is written directly, without batches)"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        return Product.objects.create(
            name=name,
            sku=sku,
            unit_price=unit_price,
            quantity=quantity,
            minimum_quantity=minimum_quantity,
            maximum_quantity=maximum_quantity,
            category=category,
            warehouse=warehouse,
            supplier=supplier,
            created_by=user,
        )

    @staticmethod
    def create_purchase(product, supplier=None, quantity=10, price=Decimal('50.00'), user=None, purchase_date=None):
        """Record a purchase through the stock service so a batch is opened"""
        data = {
            'supplier': supplier or TestDataFactory.create_supplier(),
            'product': product,
            'purchased_quantity': quantity,
            'purchase_price': price,
        }
        if purchase_date is not None:
            data['purchase_date'] = purchase_date
        return record_purchase(data, user)

    @staticmethod
    def create_sale(product, customer=None, quantity=1, price=Decimal('100.00'), user=None, sale_date=None):
        """Record a sale through the stock service (consumes batches)"""
        data = {
            'customer': customer or TestDataFactory.create_customer(),
            'product': product,
            'sold_quantity': quantity,
            'sale_price': price,
        }
        if sale_date is not None:
            data['sale_date'] = sale_date
        return record_sale(data, user)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
