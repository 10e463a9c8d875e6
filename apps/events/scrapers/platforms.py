"""Listing-page scrapers for public event platforms."""

from typing import Iterable, List, Tuple
from urllib.parse import quote, urljoin

from bs4 import BeautifulSoup

from .base import EventScraper, RawEvent, build_session, classify_event_type


def _text(element, selector: str) -> str:
    found = element.select_one(selector)
    return found.get_text(' ', strip=True) if found else ''


class ListingScraper(EventScraper):
    """
    Scraper for pages that list events as repeated cards.

    Subclasses only name their pages and CSS selectors.
    """

    base_url = ''
    card_selector = ''
    title_selector = 'h2, h3'
    date_selector = '.date'
    location_selector = '.location'

    def parse(self, html: str, *, page_url: str, note: str = '') -> List[RawEvent]:
        soup = BeautifulSoup(html, 'html.parser')
        events = []
        for card in soup.select(self.card_selector):
            title = _text(card, self.title_selector)
            date_text = _text(card, self.date_selector)
            if not title or not date_text:
                continue

            link = card.select_one('a[href]')
            href = link['href'] if link else ''
            events.append(RawEvent(
                event_type=classify_event_type(title),
                title=title,
                date_start=date_text,
                location_raw=_text(card, self.location_selector),
                source_platform=self.source_platform,
                source_url=urljoin(self.base_url or page_url, href) if href else page_url,
                notes=note,
            ))
        return events


class EventbriteScraper(ListingScraper):
    source_platform = 'Eventbrite'
    base_url = 'https://www.eventbrite.com'
    source_url = 'https://www.eventbrite.com/d/nigeria--nigeria/'
    card_selector = '[data-testid="search-result-item"], .event-card'
    title_selector = '.event-title, h3, h2'
    date_selector = '.event-date, [data-testid="event-date"]'
    location_selector = '.event-location, [data-testid="event-location"]'

    search_queries = (
        'wedding nigeria',
        'traditional marriage nigeria',
        'burial ceremony nigeria',
        'child dedication nigeria',
        'thanksgiving service nigeria',
    )

    def pages(self) -> Iterable[Tuple[str, str]]:
        for query in self.search_queries:
            yield f"{self.source_url}{quote(query)}/", f"Found via search: {query}"


class AllEventsScraper(ListingScraper):
    source_platform = 'AllEvents.in'
    base_url = 'https://allevents.in'
    source_url = 'https://allevents.in/nigeria'
    card_selector = '.event-card, .event-item'
    title_selector = '.event-title, h3'
    date_selector = '.event-date'
    location_selector = '.event-location'

    categories = ('weddings', 'religious', 'family')

    def pages(self) -> Iterable[Tuple[str, str]]:
        for category in self.categories:
            yield f"{self.source_url}/{category}", f"Category: {category}"


class TixAfricaScraper(ListingScraper):
    source_platform = 'Tix Africa'
    base_url = 'https://tix.africa'
    source_url = 'https://tix.africa/discover/ng'
    card_selector = '.event-card, .event-item'
    title_selector = 'h2, h3, .title'
    date_selector = '.date, [class*="date"]'
    location_selector = '.location, [class*="location"]'

    def pages(self) -> Iterable[Tuple[str, str]]:
        yield self.source_url, ''


def default_scrapers() -> List[EventScraper]:
    session = build_session()
    return [
        EventbriteScraper(session=session),
        AllEventsScraper(session=session),
        TixAfricaScraper(session=session),
    ]
