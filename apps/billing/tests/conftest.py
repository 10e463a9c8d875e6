import pytest
from decimal import Decimal
from datetime import timedelta
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.billing.models import Subscription, SubscriptionPlan
from apps.bookings.models import Booking, BookingItem
from apps.core.dates import utc_today
from apps.customers.models import Customer
from apps.inventory.models import Item

WEBHOOK_SECRET = 'whsec_test_secret'


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        email='payer@example.com',
        password='TestPass123!',
        display_name='Payer',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as user."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def stripe_settings(settings):
    """Configure Stripe keys for the test."""
    settings.STRIPE_SECRET_KEY = 'sk_test_123'
    settings.STRIPE_PUBLISHABLE_KEY = 'pk_test_123'
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    return settings


@pytest.fixture
def booking(db, user):
    """Booking of 1000.00 with 200.00 paid in advance."""
    customer = Customer.objects.create(owner=user, first_name='Ada')
    item = Item.objects.create(owner=user, name='Chair', unit='pcs', total_quantity=10)
    start = utc_today() + timedelta(days=5)
    booking = Booking.objects.create(
        owner=user,
        customer=customer,
        start_date=start,
        end_date=start,
        total_price=Decimal('1000.00'),
        advance_payment=Decimal('200.00'),
    )
    BookingItem.objects.create(booking=booking, item=item, quantity=2)
    return booking


@pytest.fixture
def subscription(db, user):
    return Subscription.objects.create(
        user=user,
        plan=SubscriptionPlan.PRO,
        stripe_customer_id='cus_123',
        stripe_subscription_id='sub_123',
    )
