import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db import transaction
from django.db.models import ProtectedError
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from primegestor.core.utils import log_activity
from primegestor.inventory.serializers import StockAdjustmentSerializer
from primegestor.inventory.services import (
    adjust_stock, set_stock_level, stock_trend, InsufficientStock, StockError, ADJUST_ADD
)
from .filters import ProductFilter, ProductPhotoFilter
from .models import Product, ProductPhoto
from .serializers import ProductSerializer, ProductPhotoSerializer, ProductPhotoUploadSerializer

logger = logging.getLogger('primegestor.catalog')

MAX_TREND_DAYS = 365
IMAGE_CACHE_CONTROL = 'public, max-age=31536000, immutable'


def _sku_taken(sku, exclude_pk=None):
    queryset = Product.objects.filter(sku__iexact=sku)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.exists()


def _insufficient_stock_response(error):
    logger.warning(str(error))
    return Response(
        {'error': f'Insufficient stock. Available: {error.available}', 'available': error.available},
        status=status.HTTP_400_BAD_REQUEST
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List products (filtered, newest first) or create a new product"""
    if request.method == 'GET':
        queryset = Product.objects.select_related('warehouse', 'supplier', 'created_by').order_by('-id')
        queryset = queryset
        filterset = ProductFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        products = list(filterset.qs)
        serializer = ProductSerializer(products, many=True)
        return Response({'count': len(products), 'results': serializer.data})
    else:
        serializer = ProductSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Product validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        sku = serializer.validated_data['sku']
        if _sku_taken(sku):
            return Response({'error': f'A product with SKU {sku} already exists'}, status=status.HTTP_409_CONFLICT)

        initial_quantity = serializer.validated_data.pop('quantity', 0)
        product = serializer.save(created_by=request.user, quantity=0)
        if initial_quantity:
            product = adjust_stock(product, initial_quantity, ADJUST_ADD, request.user)

        logger.info(f"Product '{product.name}' ({product.sku}) created by {request.user.email}")
        log_activity(request, 'CREATE', 'PRODUCT', product.id, product.name,
                     f"Produto criado: {product.name} (SKU: {product.sku})")
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product.objects.select_related('warehouse', 'supplier', 'created_by'), pk=pk)

    if request.method == 'GET':
        serializer = ProductSerializer(product)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        try:
            with transaction.atomic():
                # Locked so the saved quantity cannot overwrite a concurrent sale or purchase
                product = get_object_or_404(Product.objects.select_for_update(), pk=pk)
                serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH')
                if not serializer.is_valid():
                    logger.warning(f"Product {pk} validation failed: {serializer.errors}")
                    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

                sku = serializer.validated_data.get('sku')
                if sku and _sku_taken(sku, exclude_pk=product.pk):
                    return Response({'error': f'A product with SKU {sku} already exists'}, status=status.HTTP_409_CONFLICT)

                # Quantity changes go through the stock service so batches follow
                new_quantity = serializer.validated_data.pop('quantity', None)
                product = serializer.save()
                if new_quantity is not None:
                    set_stock_level(product, new_quantity, request.user)
        except InsufficientStock as e:
            return _insufficient_stock_response(e)
        product.refresh_from_db()

        log_activity(request, 'UPDATE', 'PRODUCT', product.id, product.name,
                     f"Produto atualizado: {product.name} (SKU: {product.sku})")
        return Response(ProductSerializer(product).data)
    else:  # DELETE
        name = product.name
        try:
            product.delete()
        except ProtectedError:
            logger.warning(f"Refused to delete product {pk} with recorded purchases or sales")
            return Response(
                {'error': 'Cannot delete a product with recorded purchases or sales'},
                status=status.HTTP_409_CONFLICT
            )
        logger.info(f"Product {pk} ({name}) deleted by {request.user.email}")
        log_activity(request, 'DELETE', 'PRODUCT', pk, name, f"Produto excluído: {name}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def product_stock(request, pk):
    """Manually add or remove stock"""
    product = get_object_or_404(Product, pk=pk)
    serializer = StockAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quantity = serializer.validated_data['quantity']
    adjustment_type = serializer.validated_data['type']
    try:
        product = adjust_stock(product, quantity, adjustment_type, request.user)
    except InsufficientStock as e:
        return _insufficient_stock_response(e)
    except StockError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    verb = 'adicionado' if adjustment_type == ADJUST_ADD else 'removido'
    log_activity(request, 'UPDATE', 'PRODUCT', product.id, product.name,
                 f"Estoque {verb}: {quantity} unidade(s) de {product.name}")
    return Response(ProductSerializer(product).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_stock_trend(request, pk):
    """Daily stock levels over the last N days"""
    product = get_object_or_404(Product, pk=pk)
    try:
        days = int(request.query_params.get('days', 30))
    except (TypeError, ValueError):
        return Response({'error': 'days must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    if days < 1 or days > MAX_TREND_DAYS:
        return Response({'error': f'days must be between 1 and {MAX_TREND_DAYS}'}, status=status.HTTP_400_BAD_REQUEST)

    return Response(stock_trend(product, days))


# Product photo views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def photo_list_create(request):
    """List product photos or upload a new one"""
    if request.method == 'GET':
        queryset = ProductPhoto.objects.select_related('product').defer('data')
        filterset = ProductPhotoFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductPhotoSerializer(filterset.qs.order_by('-uploaded_at', '-id'), many=True)
        return Response(serializer.data)
    else:
        serializer = ProductPhotoUploadSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Photo upload rejected: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        photo = serializer.save()
        logger.info(f"Photo {photo.file_name} uploaded for product {photo.product_id} by {request.user.email}")
        log_activity(request, 'CREATE', 'PRODUCT_PHOTO', photo.id, photo.file_name,
                     f"Foto enviada para {photo.product.name}: {photo.file_name}")
        return Response(ProductPhotoSerializer(photo).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def photo_delete(request, pk):
    """Delete a product photo"""
    photo = get_object_or_404(ProductPhoto.objects.select_related('product').defer('data'), pk=pk)
    file_name, product_name = photo.file_name, photo.product.name
    photo.delete()
    log_activity(request, 'DELETE', 'PRODUCT_PHOTO', pk, file_name,
                 f"Foto excluída de {product_name}: {file_name}")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([AllowAny])
def photo_image(request, pk):
    """Serve the stored image bytes (used directly by <img> tags)"""
    photo = ProductPhoto.objects.filter(pk=pk).first()
    if photo is None or not photo.data:
        return Response({'error': 'Image not found'}, status=status.HTTP_404_NOT_FOUND)

    response = HttpResponse(bytes(photo.data), content_type=photo.content_type or 'image/jpeg')
    response['Cache-Control'] = IMAGE_CACHE_CONTROL
    response['Content-Disposition'] = f'inline; filename="{photo.file_name}"'
    return response
