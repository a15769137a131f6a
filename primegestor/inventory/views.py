from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .filters import StockBatchFilter, StockMovementFilter
from .models import StockBatch, StockMovement
from .serializers import StockBatchSerializer, StockMovementSerializer

RECENT_MOVEMENTS_LIMIT = 100


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_batch_list(request):
    """List a product's stock batches, newest first"""
    queryset = StockBatch.objects.select_related('product', 'purchase', 'purchase__supplier')
    filterset = StockBatchFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

    batches = filterset.qs.order_by('-batch_date', '-id')
    serializer = StockBatchSerializer(batches, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def stock_movement_list(request):
    """List recent stock movements, optionally for one product"""
    queryset = StockMovement.objects.select_related('product', 'user')
    filterset = StockMovementFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = filterset.qs.order_by('-created_at', '-id')[:RECENT_MOVEMENTS_LIMIT]
    serializer = StockMovementSerializer(queryset, many=True)
    return Response(serializer.data)
