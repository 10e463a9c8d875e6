from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.billing.permissions import HasPremiumPlan
from apps.core.exports import build_csv_response
from apps.core.permissions import IsOwnerOrAdmin
from .serializers import ItemSerializer, ItemFilterSerializer
from .services import (
    get_items,
    create_item,
    update_item,
    delete_item,
    delete_all_items,
    InventoryServiceError,
)


# Response serializers for API documentation
class BulkDeleteResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    count = drf_serializers.IntegerField()


class ItemPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for rental items.

    list: Items of the current user (admins see all), ?search= on name
    create: Add an item
    retrieve: Get an item
    update / partial_update: Edit an item (stock cannot drop below upcoming reservations)
    destroy: Delete an item not used by active bookings
    """

    serializer_class = ItemSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    pagination_class = ItemPagination

    def get_permissions(self):
        if self.action == 'export':
            return [IsAuthenticated(), HasPremiumPlan()]
        return super().get_permissions()

    def get_queryset(self):
        filter_serializer = ItemFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return get_items(
            user=self.request.user,
            search=filter_serializer.validated_data.get('search'),
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = create_item(owner=request.user, **serializer.validated_data)
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        item = self.get_object()
        serializer = self.get_serializer(item, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            item = update_item(item=item, **serializer.validated_data)
        except InventoryServiceError as e:
            return Response(e.as_dict(), status=e.status_code)

        return Response(ItemSerializer(item).data)

    def destroy(self, request, *args, **kwargs):
        item = self.get_object()
        try:
            delete_item(item=item)
        except InventoryServiceError as e:
            return Response(e.as_dict(), status=e.status_code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={200: BulkDeleteResponseSerializer},
        description="Delete all of the current user's items.",
    )
    @action(detail=False, methods=['delete'], url_path='bulk')
    def bulk_delete(self, request):
        """
        DELETE /api/inventory/items/bulk/
        """
        count = delete_all_items(owner=request.user)
        return Response({
            'message': f'Deleted {count} item(s)',
            'count': count,
        })

    @extend_schema(
        parameters=[OpenApiParameter('search', str, required=False)],
        responses={(200, 'text/csv'): OpenApiTypes.STR},
        description="Download items as CSV (Pro and Business plans).",
    )
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        GET /api/inventory/items/export/
        """
        rows = (
            [
                item.name,
                item.unit,
                item.total_quantity,
                item.price,
                item.image_url,
                item.notes,
                item.created_at.date().isoformat(),
            ]
            for item in self.get_queryset()
        )
        return build_csv_response(
            'items',
            ['Name', 'Unit', 'Total Quantity', 'Price', 'Image URL', 'Notes', 'Created'],
            rows,
        )
