"""Login, token issuing and logout."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError, InvalidRefreshTokenError

User = get_user_model()
logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> dict:
    """JWT pair for ``user`` as ``{'refresh': ..., 'access': ...}``."""
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp ``last_login``.

    The email lookup is case-insensitive. The row is locked while
    ``last_login`` is written.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: The account is deactivated
    """
    user = User.objects.select_for_update().filter(email__iexact=email).first()
    if user is None or not user.check_password(password):
        logger.info("Failed login", extra={'email': email})
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user


def revoke_refresh_token(*, token: str) -> None:
    """
    Blacklist a refresh token so it can no longer mint access tokens.

    Raises:
        InvalidRefreshTokenError: If the token is malformed, expired or already blacklisted
    """
    try:
        RefreshToken(token).blacklist()
    except TokenError as e:
        raise InvalidRefreshTokenError(f"Invalid token: {e}")
