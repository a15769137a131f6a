import logging
from datetime import timedelta
from decimal import Decimal

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Count, F, DecimalField, ExpressionWrapper
from django.utils import timezone

from primegestor.catalog.models import Product
from primegestor.catalog.serializers import ProductSerializer
from primegestor.inventory.models import StockMovement
from primegestor.inventory.serializers import StockMovementSerializer
from primegestor.locations.models import Warehouse
from primegestor.sales.models import Sale
from .exports import xlsx_response
from .rows import REPORT_BUILDERS

logger = logging.getLogger('primegestor.reports')

DASHBOARD_PROFIT_DAYS = 30
RECENT_MOVEMENTS = 10
MAX_REPORT_DAYS = 365


def _daily_sales(start_date):
    """Revenue, profit and sale count per local day since start_date"""
    daily = {}
    sales = Sale.objects.filter(sale_date__date__gte=start_date).order_by('sale_date')
    for sale in sales.only('sale_date', 'sold_quantity', 'sale_price', 'cost_of_goods_sold'):
        day = daily.setdefault(timezone.localdate(sale.sale_date), {
            'revenue': Decimal('0.00'), 'profit': Decimal('0.00'), 'sales': 0, 'quantity': 0,
        })
        day['revenue'] += sale.get_revenue()
        day['profit'] += sale.get_profit()
        day['sales'] += 1
        day['quantity'] += sale.sold_quantity
    return daily


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard(request):
    """Inventory totals, low stock, stock movements and the last 30 days of profit"""
    try:
        products = Product.objects.select_related('warehouse', 'supplier', 'created_by')
        stock_value = ExpressionWrapper(F('quantity') * F('unit_price'), output_field=DecimalField())
        totals = products.aggregate(
            total_products=Count('id'),
            total_stock=Sum('quantity'),
            inventory_value=Sum(stock_value),
        )
        low_stock = [product for product in products.order_by('name') if product.is_low_stock()]

        warehouses = Warehouse.objects.annotate(product_count=Count('products')).order_by('name')
        products_by_warehouse = [
            {'id': warehouse.id, 'name': warehouse.name, 'product_count': warehouse.product_count}
            for warehouse in warehouses
        ]

        movements = StockMovement.objects.select_related('product', 'user').order_by('-created_at', '-id')[:RECENT_MOVEMENTS]

        start_date = timezone.localdate() - timedelta(days=DASHBOARD_PROFIT_DAYS)
        daily = _daily_sales(start_date)
        profit_data = [
            {'date': date.isoformat(), 'profit': str(day['profit']), 'revenue': str(day['revenue']), 'sales': day['quantity']}
            for date, day in sorted(daily.items())
        ]
        total_profit = sum((day['profit'] for day in daily.values()), Decimal('0.00'))
        total_revenue = sum((day['revenue'] for day in daily.values()), Decimal('0.00'))

        return Response({
            'total_products': totals['total_products'] or 0,
            'total_inventory_value': str((totals['inventory_value'] or Decimal('0')).quantize(Decimal('0.01'))),
            'total_stock_quantity': totals['total_stock'] or 0,
            'low_stock_count': len(low_stock),
            'low_stock_products': ProductSerializer(low_stock, many=True).data,
            'products_by_warehouse': products_by_warehouse,
            'recent_stock_movements': StockMovementSerializer(movements, many=True).data,
            'profit_data': profit_data,
            'total_profit': str(total_profit.quantize(Decimal('0.01'))),
            'total_revenue': str(total_revenue.quantize(Decimal('0.01'))),
        })
    except Exception as e:
        logger.error(f"Error building dashboard: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to fetch dashboard statistics'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profit_loss(request):
    """Daily revenue and profit for every day of the window, today included"""
    try:
        days = int(request.query_params.get('days', 30))
    except (TypeError, ValueError):
        return Response({'error': 'days must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    if days < 1 or days > MAX_REPORT_DAYS:
        return Response({'error': f'days must be between 1 and {MAX_REPORT_DAYS}'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        start_date = timezone.localdate() - timedelta(days=days)
        daily = _daily_sales(start_date)

        rows = []
        total_revenue = Decimal('0.00')
        total_profit = Decimal('0.00')
        for offset in range(days + 1):
            date = start_date + timedelta(days=offset)
            day = daily.get(date)
            revenue = day['revenue'] if day else Decimal('0.00')
            profit = day['profit'] if day else Decimal('0.00')
            total_revenue += revenue
            total_profit += profit
            rows.append({
                'date': date.isoformat(),
                'revenue': str(revenue.quantize(Decimal('0.01'))),
                'profit': str(profit.quantize(Decimal('0.01'))),
                'sales': day['sales'] if day else 0,
            })

        return Response({
            'total_revenue': str(total_revenue.quantize(Decimal('0.01'))),
            'total_profit': str(total_profit.quantize(Decimal('0.01'))),
            'daily_data': rows,
        })
    except Exception as e:
        logger.error(f"Error fetching profit/loss data: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to fetch profit/loss data'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def tabular_report(request, name):
    """Report rows as JSON, or as an Excel workbook with ?export=xlsx"""
    builder = REPORT_BUILDERS.get(name)
    if builder is None:
        return Response({'error': f'Unknown report: {name}'}, status=status.HTTP_404_NOT_FOUND)

    try:
        rows = builder()
    except Exception as e:
        logger.error(f"Error building {name} report: {str(e)}", exc_info=True)
        return Response({'error': f'Failed to fetch the {name} report'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if request.query_params.get('export') == 'xlsx':
        logger.info(f"{name} report exported by {request.user.email} ({len(rows)} rows)")
        return xlsx_response(rows, name)
    return Response(rows)
