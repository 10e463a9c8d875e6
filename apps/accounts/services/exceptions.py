"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class UserRegistrationError(AccountsServiceError):
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Wrong email or password. The message never says which."""

    status_code = 401


class InactiveAccountError(AccountsServiceError):
    status_code = 403


class InvalidRefreshTokenError(AccountsServiceError):
    """Raised when a refresh token cannot be blacklisted (expired, malformed or already revoked)."""
    pass


class PublicPageSlugTakenError(AccountsServiceError):
    """Raised when another user already owns the requested public page slug."""
    pass


class PublicPageNotFoundError(AccountsServiceError):
    """Raised when a public page does not exist or is disabled."""

    status_code = 404
