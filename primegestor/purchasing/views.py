import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from primegestor.core.utils import log_activity
from primegestor.inventory.services import record_purchase
from .filters import PurchaseFilter
from .models import Purchase
from .serializers import PurchaseSerializer

logger = logging.getLogger('primegestor.purchasing')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_list_create(request):
    """List purchases or record a new one (which adds a stock batch)"""
    if request.method == 'GET':
        queryset = Purchase.objects.select_related('product', 'supplier', 'created_by')
        filterset = PurchaseFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = PurchaseSerializer(filterset.qs.order_by('-purchase_date', '-id'), many=True)
        return Response(serializer.data)
    else:
        serializer = PurchaseSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Purchase validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        purchase = record_purchase(serializer.validated_data, request.user)
        logger.info(f"Purchase {purchase.id} created by {request.user.email}")
        log_activity(request, 'CREATE', 'PURCHASE', purchase.id, purchase.product.name,
                     f"Compra registrada: {purchase.purchased_quantity} x {purchase.product.name} "
                     f"de {purchase.supplier.name} a {purchase.purchase_price}")
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_detail(request, pk):
    """Retrieve a purchase"""
    purchase = get_object_or_404(Purchase.objects.select_related('product', 'supplier', 'created_by'), pk=pk)
    serializer = PurchaseSerializer(purchase)
    return Response(serializer.data)
