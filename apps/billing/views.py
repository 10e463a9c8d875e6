from rest_framework import status, serializers
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django.conf import settings
from drf_spectacular.utils import extend_schema
from apps.accounts.services import get_business_settings
from apps.bookings.models import Booking
from apps.core.querysets import filter_owned
from apps.core.throttles import PaymentInitializeThrottle
from .serializers import (
    PaymentInitializeSerializer,
    PaymentIntentSerializer,
    SubscriptionSerializer,
    PortalSessionSerializer,
)
from .services import (
    create_payment_intent,
    construct_webhook_event,
    create_billing_portal_session,
    handle_webhook_event,
    get_subscription,
    get_stripe_customer_id,
    BillingServiceError,
    BookingNotFoundError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class WebhookResponseSerializer(serializers.Serializer):
    received = serializers.BooleanField()


@extend_schema(
    request=PaymentInitializeSerializer,
    responses={
        200: PaymentIntentSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Start a card payment, optionally for one of the caller's bookings.",
    tags=['billing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@throttle_classes([PaymentInitializeThrottle])
def initialize_payment(request):
    """Create a Stripe PaymentIntent and return its client secret."""
    serializer = PaymentInitializeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    metadata = {'user_id': str(request.user.id)}
    try:
        booking_id = data.get('booking_id')
        if booking_id:
            if not filter_owned(Booking.objects.all(), request.user).filter(id=booking_id).exists():
                raise BookingNotFoundError("Booking not found")
            metadata['booking_id'] = str(booking_id)

        currency = data.get('currency') or get_business_settings(user=request.user).currency
        intent = create_payment_intent(
            amount=data['amount'],
            currency=currency,
            description=data['description'],
            customer_email=request.user.email,
            metadata=metadata,
        )
    except BillingServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response(PaymentIntentSerializer(intent).data)


@extend_schema(
    request=None,
    responses={200: WebhookResponseSerializer, 400: ErrorResponseSerializer},
    description="Stripe webhook endpoint; the body is verified with the Stripe-Signature header.",
    tags=['billing'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def stripe_webhook(request):
    """Receive Stripe events."""
    try:
        event = construct_webhook_event(
            payload=request.body,
            signature=request.META.get('HTTP_STRIPE_SIGNATURE', ''),
        )
    except BillingServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    handle_webhook_event(event)
    return Response({'received': True})


@extend_schema(
    request=None,
    responses={200: PortalSessionSerializer, 404: ErrorResponseSerializer, 503: ErrorResponseSerializer},
    description="Open the Stripe billing portal for the caller's subscription.",
    tags=['billing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def billing_portal(request):
    try:
        customer_id = get_stripe_customer_id(user=request.user)
        url = create_billing_portal_session(
            customer_id=customer_id,
            return_url=f"{settings.APP_URL.rstrip('/')}/billing",
        )
    except BillingServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response({'url': url})


@extend_schema(
    responses={200: SubscriptionSerializer},
    description="Current plan of the caller.",
    tags=['billing'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_subscription(request):
    return Response(SubscriptionSerializer(get_subscription(user=request.user)).data)
