"""Domain-specific exceptions for event services."""


class EventServiceError(Exception):
    """Base exception for event services."""

    status_code = 400

    def as_dict(self):
        return {'error': str(self)}


class ScraperNotFoundError(EventServiceError):
    """Raised when no scraper is registered under the requested name."""

    status_code = 404
