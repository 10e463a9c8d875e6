"""User registration service."""

import logging

from django.conf import settings
from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import BusinessSettings
from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    business_name: str = ""
) -> User:
    """
    Register a new user together with their default business settings.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        business_name: Optional business name shown on receipts

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    BusinessSettings.objects.create(
        user=user,
        business_name=business_name,
        currency=settings.DEFAULT_CURRENCY,
        currency_symbol=settings.DEFAULT_CURRENCY_SYMBOL,
    )

    logger.info("User registered", extra={'user_id': str(user.id)})
    return user
