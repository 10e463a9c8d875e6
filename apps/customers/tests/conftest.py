import pytest
from datetime import timedelta
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
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
def ada(user):
    return Customer.objects.create(owner=user, first_name='Ada', last_name='Obi', phone='08031234567')


@pytest.fixture
def chidi(user):
    return Customer.objects.create(owner=user, first_name='Chidi', last_name='Eze', email='chidi@example.com')


@pytest.fixture
def stranger(other_user):
    return Customer.objects.create(owner=other_user, first_name='Musa', last_name='Bello')


@pytest.fixture
def booked(user, ada):
    """A returned booking of two tents for ada."""
    tents = Item.objects.create(owner=user, name='Tent', unit='pcs', total_quantity=5)
    start = utc_today() - timedelta(days=5)
    booking = Booking.objects.create(
        owner=user,
        customer=ada,
        start_date=start,
        end_date=start + timedelta(days=1),
        status=BookingStatus.RETURNED,
    )
    BookingItem.objects.create(booking=booking, item=tents, quantity=2)
    return booking
