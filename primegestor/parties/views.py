import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q, ProtectedError
from django.shortcuts import get_object_or_404
from primegestor.core.utils import log_activity
from .models import Customer, Supplier
from .serializers import CustomerSerializer, SupplierSerializer

logger = logging.getLogger('primegestor.parties')


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List all customers or create a new customer"""
    if request.method == 'GET':
        customers = Customer.objects.all()
        search = request.query_params.get('search', '').strip()
        if search:
            customers = customers.filter(
                Q(name__icontains=search) |
                Q(phone__icontains=search) |
                Q(email__icontains=search)
            )
        serializer = CustomerSerializer(customers.order_by('name'), many=True)
        return Response(serializer.data)
    else:
        serializer = CustomerSerializer(data=request.data)
        if serializer.is_valid():
            customer = serializer.save()
            logger.info(f"Customer '{customer.name}' created by {request.user.email}")
            log_activity(request, 'CREATE', 'CUSTOMER', customer.id, customer.name,
                         f"Cliente criado: {customer.name}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    customer = get_object_or_404(Customer, pk=pk)

    if request.method == 'GET':
        serializer = CustomerSerializer(customer)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(request, 'UPDATE', 'CUSTOMER', customer.id, customer.name,
                         f"Cliente atualizado: {customer.name}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        name = customer.name
        try:
            customer.delete()
        except ProtectedError:
            logger.warning(f"Refused to delete customer {pk} with recorded sales")
            return Response({'error': 'Cannot delete a customer with recorded sales'}, status=status.HTTP_409_CONFLICT)
        log_activity(request, 'DELETE', 'CUSTOMER', pk, name, f"Cliente excluído: {name}")
        return Response(status=status.HTTP_204_NO_CONTENT)


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        suppliers = Supplier.objects.all()
        search = request.query_params.get('search', '').strip()
        if search:
            suppliers = suppliers.filter(
                Q(name__icontains=search) |
                Q(contact_person__icontains=search) |
                Q(phone__icontains=search) |
                Q(email__icontains=search)
            )
        serializer = SupplierSerializer(suppliers.order_by('name'), many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            logger.info(f"Supplier '{supplier.name}' created by {request.user.email}")
            log_activity(request, 'CREATE', 'SUPPLIER', supplier.id, supplier.name,
                         f"Fornecedor criado: {supplier.name}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(request, 'UPDATE', 'SUPPLIER', supplier.id, supplier.name,
                         f"Fornecedor atualizado: {supplier.name}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        name = supplier.name
        try:
            supplier.delete()
        except ProtectedError:
            logger.warning(f"Refused to delete supplier {pk} with recorded purchases")
            return Response({'error': 'Cannot delete a supplier with recorded purchases'}, status=status.HTTP_409_CONFLICT)
        log_activity(request, 'DELETE', 'SUPPLIER', pk, name, f"Fornecedor excluído: {name}")
        return Response(status=status.HTTP_204_NO_CONTENT)
