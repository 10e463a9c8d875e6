from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class PublicAvailabilityThrottle(AnonRateThrottle):
    """Per-IP limit for the anonymous availability check on public pages."""

    scope = 'public_availability'


class PaymentInitializeThrottle(UserRateThrottle):
    scope = 'payment_initialize'
