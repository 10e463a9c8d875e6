"""
Scraper building blocks.

A scraper turns one source into ``RawEvent`` records. Fetching is shared:
every scraper goes through a ``requests.Session`` that retries transient
failures with exponential backoff.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import requests
import structlog
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from apps.events.models import EventType

logger = structlog.get_logger(__name__)

RETRY_STATUSES = (429, 500, 502, 503, 504)

# Checked in order; the first keyword found in the title wins
EVENT_TYPE_KEYWORDS = (
    (('traditional marriage', 'traditional wedding', 'introduction ceremony'), EventType.TRADITIONAL_MARRIAGE),
    (('wedding', 'banns', 'holy matrimony'), EventType.WEDDING),
    (('burial', 'funeral', 'interment'), EventType.BURIAL),
    (('memorial', 'remembrance'), EventType.MEMORIAL),
    (('dedication',), EventType.CHILD_DEDICATION),
    (('christening', 'baptism'), EventType.CHRISTENING),
    (('naming',), EventType.NAMING),
    (('thanksgiving',), EventType.THANKSGIVING),
    (('anniversary',), EventType.ANNIVERSARY),
    (('birthday',), EventType.BIRTHDAY),
)


@dataclass
class RawEvent:
    """An event as found on the page, before normalization."""

    event_type: str
    title: str
    date_start: str
    source_platform: str
    source_url: str
    date_end: Optional[str] = None
    location_raw: str = ''
    location_state: str = ''
    location_city_lga: str = ''
    venue_name: str = ''
    contact_name: str = ''
    contact_role: str = ''
    contact_phone: str = ''
    contact_email: str = ''
    organizer_org: str = ''
    organizer_social: str = ''
    source_published_at: Optional[str] = None
    notes: str = ''


@dataclass
class ScraperResult:
    source_platform: str
    source_url: str = ''
    events: List[RawEvent] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    execution_time_ms: int = 0


def classify_event_type(title: str) -> str:
    lowered = title.lower()
    for keywords, event_type in EVENT_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return event_type
    return EventType.OTHER_CEREMONY


def build_session(retries: int = 3, backoff_factor: float = 1.0) -> requests.Session:
    """Session retrying GETs on connection errors and 429/5xx responses."""
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset(['GET']),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.headers.update({'User-Agent': settings.EVENT_SCRAPER_USER_AGENT})
    return session


def fetch_html(url: str, *, session: requests.Session, timeout: Optional[int] = None) -> str:
    """
    GET ``url`` and return the body.

    Raises:
        requests.RequestException: On network errors, exhausted retries or
            a non-2xx response
    """
    response = session.get(url, timeout=timeout or settings.EVENT_SCRAPER_TIMEOUT)
    response.raise_for_status()
    return response.text


class EventScraper(ABC):
    """
    Base class for all event sources.

    Subclasses list the pages to fetch and parse each one; the base class
    handles fetching, timing and error collection.
    """

    source_platform: str = ''
    source_url: str = ''

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or build_session()

    @abstractmethod
    def pages(self) -> Iterable[Tuple[str, str]]:
        """Yield ``(url, note)`` pairs; the note is stored on every event of the page."""

    @abstractmethod
    def parse(self, html: str, *, page_url: str, note: str = '') -> List[RawEvent]:
        """Extract events from one fetched page."""

    def scrape(self) -> ScraperResult:
        started = time.monotonic()
        result = ScraperResult(source_platform=self.source_platform, source_url=self.source_url)

        for url, note in self.pages():
            try:
                html = fetch_html(url, session=self.session)
            except requests.RequestException as e:
                logger.warning("scraper_fetch_failed", source=self.source_platform, url=url, error=str(e))
                result.errors.append(f"Failed to fetch {url}: {e}")
                continue
            result.events.extend(self.parse(html, page_url=url, note=note))

        result.execution_time_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "scraper_finished",
            source=self.source_platform,
            events=len(result.events),
            errors=len(result.errors),
            execution_time_ms=result.execution_time_ms,
        )
        return result
