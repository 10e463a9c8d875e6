from django.db.models import Count
from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from apps.billing.permissions import HasPremiumPlan
from apps.core.exports import build_csv_response
from apps.core.permissions import IsOwnerOrAdmin
from .serializers import CustomerSerializer, CustomerFilterSerializer
from .services import (
    get_customers,
    create_customer,
    update_customer,
    delete_customer,
    delete_all_customers,
    CustomerServiceError,
)


class CustomerBulkDeleteResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    count = drf_serializers.IntegerField()
    skipped = drf_serializers.IntegerField()


class CustomerPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CustomerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for customers.

    Names are title-cased on write and the display name follows first/last
    name. Customers with bookings cannot be deleted.
    """

    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    pagination_class = CustomerPagination

    def get_permissions(self):
        if self.action == 'export':
            return [IsAuthenticated(), HasPremiumPlan()]
        return super().get_permissions()

    def get_queryset(self):
        filter_serializer = CustomerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return get_customers(
            user=self.request.user,
            search=filter_serializer.validated_data.get('search'),
        ).annotate(booking_count=Count('bookings')).order_by('first_name', 'last_name')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = create_customer(owner=request.user, **serializer.validated_data)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        customer = self.get_object()
        serializer = self.get_serializer(customer, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        customer = update_customer(customer=customer, **serializer.validated_data)
        return Response(CustomerSerializer(customer).data)

    def destroy(self, request, *args, **kwargs):
        customer = self.get_object()
        try:
            delete_customer(customer=customer)
        except CustomerServiceError as e:
            return Response(e.as_dict(), status=e.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={200: CustomerBulkDeleteResponseSerializer},
        description="Delete all of the current user's customers that have no bookings.",
    )
    @action(detail=False, methods=['delete'], url_path='bulk')
    def bulk_delete(self, request):
        """
        DELETE /api/customers/bulk/
        """
        result = delete_all_customers(owner=request.user)
        return Response({
            'message': f"Deleted {result['count']} customer(s)",
            **result,
        })

    @extend_schema(
        responses={(200, 'text/csv'): OpenApiTypes.STR},
        description="Download customers as CSV (Pro and Business plans).",
    )
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        GET /api/customers/export/
        """
        rows = (
            [
                customer.first_name,
                customer.last_name,
                customer.phone,
                customer.email,
                customer.address,
                customer.booking_count,
                customer.created_at.date().isoformat(),
            ]
            for customer in self.get_queryset()
        )
        return build_csv_response(
            'customers',
            ['First Name', 'Last Name', 'Phone', 'Email', 'Address', 'Bookings', 'Created'],
            rows,
        )
