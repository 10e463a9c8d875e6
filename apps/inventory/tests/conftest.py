import pytest
from datetime import timedelta
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.billing.models import Subscription, SubscriptionPlan
from apps.bookings.models import Booking, BookingItem, BookingStatus
from apps.core.dates import utc_today
from apps.customers.models import Customer
from apps.inventory.models import Item


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(email='test@example.com', password='TestPass123!')


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(email='other@example.com', password='TestPass123!')


@pytest.fixture
def authenticated_client(user):
    """Return API client authenticated as user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def pro_plan(user):
    return Subscription.objects.create(user=user, plan=SubscriptionPlan.PRO)


@pytest.fixture
def chairs(user):
    return Item.objects.create(owner=user, name='Chiavari chair', unit='pcs', total_quantity=100, price='350.00')


@pytest.fixture
def canopy(user):
    return Item.objects.create(owner=user, name='Canopy', unit='sets', total_quantity=4)


@pytest.fixture
def other_item(other_user):
    return Item.objects.create(owner=other_user, name='Tent', unit='pcs', total_quantity=5)


@pytest.fixture
def reserve(user):
    """Factory booking ``quantity`` of ``item`` for ``days`` days starting ``offset`` days from today."""
    customer = Customer.objects.create(owner=user, first_name='Bisi', last_name='Ade')

    def _reserve(item, quantity, offset=1, days=2, status=BookingStatus.CONFIRMED):
        start = utc_today() + timedelta(days=offset)
        booking = Booking.objects.create(
            owner=user,
            customer=customer,
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            status=status,
        )
        BookingItem.objects.create(booking=booking, item=item, quantity=quantity)
        return booking

    return _reserve
