import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, PublicPage


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def other_user(db):
    """Create and return another user."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return API client authenticated as user."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_public_page(db, other_user):
    """Public page owned by other_user."""
    return PublicPage.objects.create(user=other_user, slug='party-rentals', title='Party Rentals')
