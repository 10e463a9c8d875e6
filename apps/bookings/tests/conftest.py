import pytest
from datetime import timedelta
from decimal import Decimal
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, PublicPage
from apps.bookings.models import Booking, BookingItem, BookingStatus
from apps.core.dates import utc_today
from apps.customers.models import Customer
from apps.inventory.models import Item


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner(db):
    """Create and return the rental business owner."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Rental Owner',
    )


@pytest.fixture
def other_owner(db):
    """Create and return an unrelated business owner."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Owner',
    )


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def owner_client(owner):
    """Return API client authenticated as owner."""
    return _client_for(owner)


@pytest.fixture
def other_client(other_owner):
    """Return API client authenticated as other_owner."""
    return _client_for(other_owner)


@pytest.fixture
def customer(db, owner):
    return Customer.objects.create(owner=owner, first_name='Ada', last_name='Obi', phone='08031234567')


@pytest.fixture
def chairs(db, owner):
    """50 chairs at 500.00 each."""
    return Item.objects.create(
        owner=owner,
        name='Chair',
        unit='pcs',
        total_quantity=50,
        price=Decimal('500.00'),
    )


@pytest.fixture
def tables(db, owner):
    return Item.objects.create(owner=owner, name='Table', unit='pcs', total_quantity=10)


@pytest.fixture
def other_item(db, other_owner):
    return Item.objects.create(owner=other_owner, name='Tent', unit='pcs', total_quantity=5)


@pytest.fixture
def start_day():
    """A day safely in the future."""
    return utc_today() + timedelta(days=10)


@pytest.fixture
def make_booking(db, owner, customer):
    """Factory creating a booking directly in the database."""

    def _make(start, end, lines, status=BookingStatus.CONFIRMED, **fields):
        booking = Booking.objects.create(
            owner=owner,
            customer=customer,
            start_date=start,
            end_date=end,
            status=status,
            **fields,
        )
        for item, quantity in lines:
            BookingItem.objects.create(booking=booking, item=item, quantity=quantity)
        return booking

    return _make


@pytest.fixture
def booking(make_booking, chairs, start_day):
    """40 chairs for three days, priced 1000.00 with 200.00 advance."""
    return make_booking(
        start_day,
        start_day + timedelta(days=2),
        [(chairs, 40)],
        total_price=Decimal('1000.00'),
        advance_payment=Decimal('200.00'),
        reference='WED-001',
    )


@pytest.fixture
def public_page(db, owner):
    return PublicPage.objects.create(user=owner, slug='ada-rentals', title='Ada Rentals')
