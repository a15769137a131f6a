import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count
from django.shortcuts import get_object_or_404
from primegestor.core.utils import log_activity
from .models import Warehouse
from .serializers import WarehouseSerializer

logger = logging.getLogger('primegestor.locations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warehouse_list_create(request):
    """List all warehouses with their product counts or create a new warehouse"""
    if request.method == 'GET':
        warehouses = Warehouse.objects.annotate(product_count=Count('products')).order_by('name')
        serializer = WarehouseSerializer(warehouses, many=True)
        return Response(serializer.data)
    else:
        serializer = WarehouseSerializer(data=request.data)
        if serializer.is_valid():
            warehouse = serializer.save()
            logger.info(f"Warehouse '{warehouse.name}' created by {request.user.email}")
            log_activity(request, 'CREATE', 'WAREHOUSE', warehouse.id, warehouse.name,
                         f"Cor criada: {warehouse.name}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        logger.warning(f"Warehouse creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def warehouse_detail(request, pk):
    """Retrieve, update or delete a warehouse (delete only when it holds no products)"""
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == 'GET':
        serializer = WarehouseSerializer(warehouse)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseSerializer(warehouse, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Warehouse {pk} updated by {request.user.email}")
            log_activity(request, 'UPDATE', 'WAREHOUSE', warehouse.id, warehouse.name,
                         f"Cor atualizada: {warehouse.name}")
            return Response(serializer.data)
        logger.warning(f"Warehouse update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        product_count = warehouse.products.count()
        if product_count > 0:
            logger.warning(f"Refused to delete warehouse {pk} holding {product_count} products")
            return Response(
                {'error': f'Cannot delete warehouse with {product_count} products. '
                          f'Please move or delete all products first.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        name = warehouse.name
        warehouse.delete()
        logger.info(f"Warehouse {pk} ({name}) deleted by {request.user.email}")
        log_activity(request, 'DELETE', 'WAREHOUSE', pk, name, f"Cor excluída: {name}")
        return Response(status=status.HTTP_204_NO_CONTENT)
