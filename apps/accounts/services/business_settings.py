"""Business settings and public page management."""

from django.conf import settings
from django.db import transaction

from apps.accounts.models import BusinessSettings, PublicPage, User
from .exceptions import PublicPageSlugTakenError, PublicPageNotFoundError


def get_business_settings(*, user: User) -> BusinessSettings:
    """Return the user's settings, creating defaults on first access."""
    business_settings, _ = BusinessSettings.objects.get_or_create(
        user=user,
        defaults={
            'currency': settings.DEFAULT_CURRENCY,
            'currency_symbol': settings.DEFAULT_CURRENCY_SYMBOL,
        },
    )
    return business_settings


@transaction.atomic
def update_business_settings(*, user: User, **fields) -> BusinessSettings:
    """
    Apply validated field values to the user's settings.

    Unknown keys are ignored so serializers can pass validated_data through.
    """
    business_settings = get_business_settings(user=user)
    allowed = {f.name for f in BusinessSettings._meta.get_fields()} - {'id', 'user', 'created_at', 'updated_at'}

    changed = []
    for name, value in fields.items():
        if name in allowed:
            setattr(business_settings, name, value)
            changed.append(name)

    if changed:
        business_settings.save(update_fields=changed + ['updated_at'])
    return business_settings


@transaction.atomic
def upsert_public_page(*, user: User, slug: str, title: str = '', is_active: bool = True) -> PublicPage:
    """
    Create or update the user's public availability page.

    Raises:
        PublicPageSlugTakenError: If another user owns the slug
    """
    slug = slug.strip().lower()
    if PublicPage.objects.filter(slug=slug).exclude(user=user).exists():
        raise PublicPageSlugTakenError(f"The page address '{slug}' is already taken")

    page, _ = PublicPage.objects.update_or_create(
        user=user,
        defaults={'slug': slug, 'title': title, 'is_active': is_active},
    )
    return page


def get_active_public_page(*, slug: str) -> PublicPage:
    """
    Raises:
        PublicPageNotFoundError: If the page is missing or disabled
    """
    try:
        return PublicPage.objects.select_related('user').get(slug=slug, is_active=True)
    except PublicPage.DoesNotExist:
        raise PublicPageNotFoundError("Page not found")


def get_public_page(*, user: User) -> PublicPage:
    """
    Raises:
        PublicPageNotFoundError: If the user has not set up a page yet
    """
    try:
        return PublicPage.objects.get(user=user)
    except PublicPage.DoesNotExist:
        raise PublicPageNotFoundError("No public page configured")
