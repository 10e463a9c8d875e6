from .base import (
    EventScraper,
    RawEvent,
    ScraperResult,
    build_session,
    classify_event_type,
    fetch_html,
)
from .platforms import (
    ListingScraper,
    EventbriteScraper,
    AllEventsScraper,
    TixAfricaScraper,
    default_scrapers,
)

__all__ = [
    'EventScraper',
    'RawEvent',
    'ScraperResult',
    'build_session',
    'classify_event_type',
    'fetch_html',
    'ListingScraper',
    'EventbriteScraper',
    'AllEventsScraper',
    'TixAfricaScraper',
    'default_scrapers',
]
