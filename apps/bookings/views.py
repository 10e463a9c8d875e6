from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.accounts.services import get_active_public_page, PublicPageNotFoundError
from apps.billing.permissions import HasPremiumPlan
from apps.core.exports import build_csv_response
from apps.core.permissions import IsOwnerOrAdmin
from apps.core.throttles import PublicAvailabilityThrottle
from .models import Booking
from .serializers import (
    BookingSerializer,
    BookingFilterSerializer,
    BookingInputSerializer,
    BookingStatusInputSerializer,
    PaymentSerializer,
    PaymentInputSerializer,
    BalanceSerializer,
    ReceiptSerializer,
    CalendarEventSerializer,
    CalendarQuerySerializer,
    DayQuerySerializer,
    PublicAvailabilityInputSerializer,
    PublicAvailabilitySerializer,
)
from .services import (
    get_bookings,
    create_booking,
    update_booking,
    update_booking_status,
    delete_booking,
    delete_all_bookings,
    get_balance,
    record_payment,
    get_payments,
    get_calendar_events,
    get_day_summary,
    build_receipt,
    check_public_availability,
    BookingServiceError,
)


# Response serializers for API documentation
class BulkDeleteResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    count = drf_serializers.IntegerField()


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class DaySummarySerializer(drf_serializers.Serializer):
    date = drf_serializers.DateField()
    bookings = drf_serializers.ListField(child=drf_serializers.DictField())
    items = drf_serializers.ListField(child=drf_serializers.DictField())


class PublicAvailabilityResponseSerializer(drf_serializers.Serializer):
    start_date = drf_serializers.DateField()
    end_date = drf_serializers.DateField()
    items = PublicAvailabilitySerializer(many=True)


class BookingPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class BookingViewSet(viewsets.ModelViewSet):
    """
    ViewSet for bookings (also served as /api/rentals/).

    list: Bookings of the current user, filterable by status, customer and dates
    create: Book items for a customer (availability checked per day)
    retrieve: Booking with lines and balance
    update: Replace customer, dates, items and pricing (PUT)
    partial_update: Change status and/or calendar color (PATCH)
    destroy: Delete a booking with its lines and payments
    """

    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated, IsOwnerOrAdmin]
    pagination_class = BookingPagination

    def get_permissions(self):
        if self.action == 'export':
            return [IsAuthenticated(), HasPremiumPlan()]
        return super().get_permissions()

    def get_queryset(self):
        filter_serializer = BookingFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data
        return get_bookings(
            user=self.request.user,
            status=params.get('status'),
            customer_id=params.get('customer'),
            date_from=params.get('date_from'),
            date_to=params.get('date_to'),
        )

    def _booking_response(self, booking, status_code=status.HTTP_200_OK):
        booking = (
            Booking.objects.select_related('customer')
            .prefetch_related('items__item')
            .get(pk=booking.pk)
        )
        return Response(BookingSerializer(booking).data, status=status_code)

    @extend_schema(
        request=BookingInputSerializer,
        responses={201: BookingSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    )
    def create(self, request, *args, **kwargs):
        serializer = BookingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            booking = create_booking(owner=request.user, **serializer.validated_data)
        except BookingServiceError as e:
            return Response(e.as_dict(), status=e.status_code)

        return self._booking_response(booking, status.HTTP_201_CREATED)

    @extend_schema(
        request=BookingInputSerializer,
        responses={200: BookingSerializer, 400: ErrorResponseSerializer, 409: ErrorResponseSerializer},
    )
    def update(self, request, *args, **kwargs):
        booking = self.get_object()
        serializer = BookingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data.copy()
        data.pop('initial_payments', None)

        try:
            booking = update_booking(booking=booking, **data)
        except BookingServiceError as e:
            return Response(e.as_dict(), status=e.status_code)

        return self._booking_response(booking)

    @extend_schema(
        request=BookingStatusInputSerializer,
        responses={200: BookingSerializer, 400: ErrorResponseSerializer, 409: ErrorResponseSerializer},
    )
    def partial_update(self, request, *args, **kwargs):
        booking = self.get_object()
        serializer = BookingStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            booking = update_booking_status(booking=booking, **serializer.validated_data)
        except BookingServiceError as e:
            return Response(e.as_dict(), status=e.status_code)

        return self._booking_response(booking)

    def destroy(self, request, *args, **kwargs):
        delete_booking(booking=self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        methods=['GET'],
        responses={200: PaymentSerializer(many=True)},
        description="Payments of a booking, newest first.",
    )
    @extend_schema(
        methods=['POST'],
        request=PaymentInputSerializer,
        responses={201: PaymentSerializer, 400: ErrorResponseSerializer},
        description="Record a payment; it may not exceed the remaining balance.",
    )
    @action(detail=True, methods=['get', 'post'])
    def payments(self, request, pk=None):
        """
        GET  /api/bookings/{id}/payments/
        POST /api/bookings/{id}/payments/
        """
        booking = self.get_object()

        if request.method == 'GET':
            return Response(PaymentSerializer(get_payments(booking=booking), many=True).data)

        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = record_payment(booking=booking, **serializer.validated_data)
        except BookingServiceError as e:
            return Response(e.as_dict(), status=e.status_code)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: BalanceSerializer})
    @action(detail=True, methods=['get'])
    def balance(self, request, pk=None):
        """
        GET /api/bookings/{id}/balance/
        """
        return Response(BalanceSerializer(get_balance(self.get_object())).data)

    @extend_schema(responses={200: ReceiptSerializer})
    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        """
        GET /api/bookings/{id}/receipt/
        """
        return Response(ReceiptSerializer(build_receipt(booking=self.get_object())).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('start', OpenApiTypes.DATE, required=True),
            OpenApiParameter('end', OpenApiTypes.DATE, required=True),
        ],
        responses={200: CalendarEventSerializer(many=True)},
        description="Active bookings overlapping the window as all-day calendar events.",
    )
    @action(detail=False, methods=['get'])
    def calendar(self, request):
        """
        GET /api/bookings/calendar/?start=YYYY-MM-DD&end=YYYY-MM-DD
        """
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        events = get_calendar_events(user=request.user, **query.validated_data)
        return Response(CalendarEventSerializer(events, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter('date', OpenApiTypes.DATE, required=True)],
        responses={200: DaySummarySerializer},
        description="Bookings holding stock on a day and what is left of every item.",
    )
    @action(detail=False, methods=['get'])
    def day(self, request):
        """
        GET /api/bookings/day/?date=YYYY-MM-DD
        """
        query = DayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return Response(get_day_summary(user=request.user, day=query.validated_data['date']))

    @extend_schema(
        request=None,
        responses={200: BulkDeleteResponseSerializer},
        description="Delete all of the current user's bookings with their payments.",
    )
    @action(detail=False, methods=['delete'], url_path='bulk')
    def bulk_delete(self, request):
        """
        DELETE /api/bookings/bulk/
        """
        count = delete_all_bookings(owner=request.user)
        return Response({
            'message': f'Deleted {count} booking(s)',
            'count': count,
        })

    @extend_schema(
        responses={(200, 'text/csv'): OpenApiTypes.STR},
        description="Download bookings as CSV (Pro and Business plans).",
    )
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        GET /api/bookings/export/
        """
        def rows():
            for booking in self.get_queryset():
                balance = get_balance(booking)
                yield [
                    booking.reference,
                    booking.customer.name,
                    booking.start_date.isoformat(),
                    booking.end_date.isoformat(),
                    booking.status,
                    '; '.join(
                        f"{line.item.name} x{line.quantity}" for line in booking.items.all()
                    ),
                    booking.total_price if booking.total_price is not None else '',
                    balance['total_paid'],
                    balance['remaining_balance'] if balance['remaining_balance'] is not None else '',
                ]

        return build_csv_response(
            'bookings',
            ['Reference', 'Customer', 'Start', 'End', 'Status', 'Items', 'Total', 'Paid', 'Balance'],
            rows(),
        )


@extend_schema(
    request=PublicAvailabilityInputSerializer,
    responses={200: PublicAvailabilityResponseSerializer, 404: ErrorResponseSerializer},
    description="Check which items of a public rental page are free over a date range.",
    tags=['public'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([PublicAvailabilityThrottle])
def public_availability(request, slug):
    """
    POST /api/public/{slug}/availability/
    """
    try:
        page = get_active_public_page(slug=slug)
    except PublicPageNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    serializer = PublicAvailabilityInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        items = check_public_availability(page=page, **data)
    except BookingServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response({
        'start_date': data['start_date'],
        'end_date': data['end_date'],
        'items': PublicAvailabilitySerializer(items, many=True).data,
    })
