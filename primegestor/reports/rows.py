"""Report rows keyed by the column headers shown in the UI and the exports"""
from django.utils import timezone

from primegestor.catalog.models import Product
from primegestor.core.models import User
from primegestor.parties.models import Customer, Supplier
from primegestor.purchasing.models import Purchase
from primegestor.sales.models import Sale

NOT_AVAILABLE = 'N/A'
SYSTEM_USER = 'System'


def _money(value):
    return float(value or 0)


def _timestamp(value):
    return timezone.localtime(value).strftime('%Y-%m-%d %H:%M:%S') if value else NOT_AVAILABLE


def _recorded_by(user):
    return user.full_name if user else SYSTEM_USER


def product_rows():
    products = Product.objects.select_related('warehouse', 'created_by').order_by('name')
    return [{
        'Product ID': product.id,
        'Product Name': product.name,
        'SKU': product.sku,
        'Category': product.category or NOT_AVAILABLE,
        'Unit Price': _money(product.unit_price),
        'Quantity': product.quantity,
        'Minimum Quantity': product.minimum_quantity,
        'Maximum Quantity': product.maximum_quantity,
        'Warehouse': product.warehouse.name if product.warehouse else NOT_AVAILABLE,
        'Recorded By': _recorded_by(product.created_by),
        'Created At': _timestamp(product.created_at),
    } for product in products]


def purchase_rows():
    purchases = Purchase.objects.select_related('product', 'supplier', 'created_by').order_by('-purchase_date', '-id')
    return [{
        'Purchase ID': purchase.id,
        'Product': purchase.product.name,
        'SKU': purchase.product.sku,
        'Supplier': purchase.supplier.name,
        'Quantity': purchase.purchased_quantity,
        'Purchase Price': _money(purchase.purchase_price),
        'Total Cost': _money(purchase.get_total_cost()),
        'Recorded By': _recorded_by(purchase.created_by),
        'Purchase Date': _timestamp(purchase.purchase_date),
    } for purchase in purchases]


def sale_rows():
    sales = Sale.objects.select_related('product', 'customer', 'created_by').order_by('-sale_date', '-id')
    return [{
        'Sale ID': sale.id,
        'Product': sale.product.name,
        'SKU': sale.product.sku,
        'Customer': sale.customer.name,
        'Quantity': sale.sold_quantity,
        'Sale Price': _money(sale.sale_price),
        'Revenue': _money(sale.get_revenue()),
        'Cost of Goods Sold': _money(sale.cost_of_goods_sold),
        'Profit/Loss': _money(sale.get_profit()),
        'Recorded By': _recorded_by(sale.created_by),
        'Sale Date': _timestamp(sale.sale_date),
    } for sale in sales]


def supplier_rows():
    return [{
        'Supplier ID': supplier.id,
        'Supplier Name': supplier.name,
        'Contact Person': supplier.contact_person or NOT_AVAILABLE,
        'Phone': supplier.phone or NOT_AVAILABLE,
        'Email': supplier.email or NOT_AVAILABLE,
        'Address': supplier.address or NOT_AVAILABLE,
    } for supplier in Supplier.objects.order_by('name')]


def customer_rows():
    return [{
        'Customer ID': customer.id,
        'Customer Name': customer.name,
        'Phone': customer.phone or NOT_AVAILABLE,
        'Email': customer.email or NOT_AVAILABLE,
        'Address': customer.address or NOT_AVAILABLE,
    } for customer in Customer.objects.order_by('name')]


def user_rows():
    return [{
        'User ID': user.id,
        'Full Name': user.full_name,
        'Email': user.email,
        'Role': user.role,
        'Created At': _timestamp(user.created_at),
    } for user in User.objects.order_by('full_name')]


REPORT_BUILDERS = {
    'products': product_rows,
    'purchases': purchase_rows,
    'sales': sale_rows,
    'suppliers': supplier_rows,
    'customers': customer_rows,
    'users': user_rows,
}
