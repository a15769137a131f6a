import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from primegestor.core.utils import log_activity
from primegestor.inventory.services import record_sale, InsufficientStock, StockError
from .filters import SaleFilter
from .models import Sale
from .serializers import SaleSerializer

logger = logging.getLogger('primegestor.sales')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List sales or record a new one (consuming stock batches oldest first)"""
    if request.method == 'GET':
        queryset = Sale.objects.select_related('product', 'customer', 'created_by')
        filterset = SaleFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = SaleSerializer(filterset.qs.order_by('-sale_date', '-id'), many=True)
        return Response(serializer.data)
    else:
        serializer = SaleSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Sale validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            sale = record_sale(serializer.validated_data, request.user)
        except InsufficientStock as e:
            logger.warning(str(e))
            return Response(
                {'error': f'Insufficient stock. Available: {e.available}', 'available': e.available},
                status=status.HTTP_400_BAD_REQUEST
            )
        except StockError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f"Sale {sale.id} created by {request.user.email}")
        log_activity(request, 'CREATE', 'SALE', sale.id, sale.product.name,
                     f"Venda registrada: {sale.sold_quantity} x {sale.product.name} "
                     f"para {sale.customer.name} a {sale.sale_price}")
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve a sale"""
    sale = get_object_or_404(Sale.objects.select_related('product', 'customer', 'created_by'), pk=pk)
    serializer = SaleSerializer(sale)
    return Response(serializer.data)
