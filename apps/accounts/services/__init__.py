"""Services for accounts, sessions and business configuration."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidRefreshTokenError,
    PublicPageSlugTakenError,
    PublicPageNotFoundError,
)
from .user_registration import register_user
from .sessions import issue_tokens, authenticate_user, revoke_refresh_token
from .business_settings import (
    get_business_settings,
    update_business_settings,
    get_public_page,
    upsert_public_page,
    get_active_public_page,
)

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidRefreshTokenError',
    'PublicPageSlugTakenError',
    'PublicPageNotFoundError',
    # Registration and sessions
    'register_user',
    'issue_tokens',
    'authenticate_user',
    'revoke_refresh_token',
    # Business configuration
    'get_business_settings',
    'update_business_settings',
    'get_public_page',
    'upsert_public_page',
    'get_active_public_page',
]
