"""Services for community event scraping."""

from .exceptions import EventServiceError, ScraperNotFoundError
from .scraper_manager import EventScraperManager

__all__ = [
    'EventServiceError',
    'ScraperNotFoundError',
    'EventScraperManager',
]
