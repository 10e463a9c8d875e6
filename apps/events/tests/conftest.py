import pytest
from datetime import timedelta
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.billing.models import Subscription, SubscriptionPlan
from apps.core.dates import utc_today
from apps.events.models import CommunityEvent, EventType
from apps.events.scrapers import EventScraper, RawEvent, ScraperResult


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def free_user(db):
    return User.objects.create_user(email='free@example.com', password='TestPass123!')


@pytest.fixture
def premium_user(db):
    user = User.objects.create_user(email='pro@example.com', password='TestPass123!')
    Subscription.objects.create(user=user, plan=SubscriptionPlan.PRO)
    return user


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        role=UserRole.ADMIN,
    )


@pytest.fixture
def free_client(free_user):
    return _client_for(free_user)


@pytest.fixture
def premium_client(premium_user):
    return _client_for(premium_user)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def today():
    return utc_today()


@pytest.fixture
def events(db, today):
    """A Lagos wedding next week and an Abuja burial next month."""
    wedding = CommunityEvent.objects.create(
        event_id='evt_wedding',
        event_type=EventType.WEDDING,
        title='Wedding of Tolu and Ada',
        date_start=today + timedelta(days=7),
        location_state='Lagos',
        venue_name='Holy Family Church',
        source_platform='Eventbrite',
        source_url='https://www.eventbrite.com/e/1',
    )
    burial = CommunityEvent.objects.create(
        event_id='evt_burial',
        event_type=EventType.BURIAL,
        title='Burial of Chief Okafor',
        date_start=today + timedelta(days=30),
        location_state='FCT',
        source_platform='AllEvents.in',
        source_url='https://allevents.in/e/2',
    )
    return wedding, burial


class StaticScraper(EventScraper):
    """Scraper returning prepared events without any network access."""

    def __init__(self, source_platform, events=None, errors=None):
        self.source_platform = source_platform
        self.source_url = f'https://{source_platform.lower()}.example.com'
        self._events = events or []
        self._errors = errors or []

    def pages(self):
        return []

    def parse(self, html, *, page_url, note=''):
        return []

    def scrape(self):
        return ScraperResult(
            source_platform=self.source_platform,
            source_url=self.source_url,
            events=list(self._events),
            errors=list(self._errors),
        )


class BrokenScraper(StaticScraper):

    def scrape(self):
        raise RuntimeError('layout changed')


@pytest.fixture
def raw_event(today):
    def _make(title='Wedding of Tolu and Ada', days_ahead=7, source='Static', **fields):
        return RawEvent(
            event_type=EventType.WEDDING,
            title=title,
            date_start=(today + timedelta(days=days_ahead)).isoformat(),
            source_platform=source,
            source_url=fields.pop('source_url', f'https://{source.lower()}.example.com/e/1'),
            **fields,
        )
    return _make
