"""
Scraping runs: scrape, normalize, deduplicate, store, prune and log.
"""

from collections import Counter
from datetime import date
from typing import List, Optional

import structlog
from django.db import transaction
from django.db.models import Q

from apps.core.dates import utc_today
from apps.events.models import CommunityEvent, EventSourceLog
from apps.events.normalizer import (
    EventDateError,
    NormalizedEvent,
    deduplicate_events,
    is_event_in_window,
    normalize_event,
    window_start,
)
from apps.events.scrapers import EventScraper, ScraperResult, default_scrapers
from .exceptions import ScraperNotFoundError

logger = structlog.get_logger(__name__)


class EventScraperManager:
    """
    Coordinates the registered scrapers.

    Usage:
        summary = EventScraperManager().run_all()
        summary = EventScraperManager().run_single('Eventbrite')
    """

    def __init__(self, scrapers: Optional[List[EventScraper]] = None):
        self.scrapers = scrapers if scrapers is not None else default_scrapers()

    @property
    def platforms(self) -> List[str]:
        return [scraper.source_platform for scraper in self.scrapers]

    def run_all(self, today: Optional[date] = None) -> dict:
        logger.info("scraping_run_started", scrapers=len(self.scrapers))
        return self._run(self.scrapers, today or utc_today())

    def run_single(self, platform: str, today: Optional[date] = None) -> dict:
        """
        Raises:
            ScraperNotFoundError: If no scraper has ``platform`` as its name
        """
        for scraper in self.scrapers:
            if scraper.source_platform == platform:
                summary = self._run([scraper], today or utc_today())
                summary['scraper'] = platform
                return summary
        raise ScraperNotFoundError(f"Scraper not found: {platform}")

    def _scrape(self, scraper: EventScraper, today: date):
        # A broken scraper must not stop the others
        try:
            result = scraper.scrape()
        except Exception as e:
            logger.exception("scraper_crashed", source=scraper.source_platform)
            result = ScraperResult(
                source_platform=scraper.source_platform,
                source_url=scraper.source_url,
                errors=[f"Scraper failed: {e}"],
            )

        normalized = []
        for raw in result.events:
            try:
                normalized.append(normalize_event(raw, today))
            except EventDateError as e:
                result.errors.append(f"Skipped '{raw.title}': {e}")
        return result, normalized

    def _run(self, scrapers: List[EventScraper], today: date) -> dict:
        results = []
        collected: List[NormalizedEvent] = []
        for scraper in scrapers:
            result, normalized = self._scrape(scraper, today)
            results.append(result)
            collected.extend(normalized)

        unique = deduplicate_events(collected)
        in_window = [event for event in unique if is_event_in_window(event, today)]

        with transaction.atomic():
            added, updated = self._upsert(in_window)
            removed = self._remove_expired(today)
            total_active = CommunityEvent.objects.count()

            for result in results:
                EventSourceLog.objects.create(
                    source_platform=result.source_platform,
                    source_url=result.source_url,
                    events_found=len(result.events),
                    events_added=added[result.source_platform],
                    events_updated=updated[result.source_platform],
                    events_removed=removed,
                    errors=result.errors,
                    total_active=total_active,
                    execution_time_ms=result.execution_time_ms,
                )

        errors = [error for result in results for error in result.errors]
        summary = {
            'events_found': sum(len(result.events) for result in results),
            'events_unique': len(unique),
            'events_in_window': len(in_window),
            'total_added': sum(added.values()),
            'total_updated': sum(updated.values()),
            'total_removed': removed,
            'total_active': total_active,
            'errors': errors,
            'sources': [
                {
                    'source_platform': result.source_platform,
                    'events_found': len(result.events),
                    'errors': len(result.errors),
                    'execution_time_ms': result.execution_time_ms,
                }
                for result in results
            ],
        }
        logger.info(
            "scraping_run_finished",
            added=summary['total_added'],
            updated=summary['total_updated'],
            removed=removed,
            errors=len(errors),
        )
        return summary

    def _upsert(self, events: List[NormalizedEvent]):
        added = Counter()
        updated = Counter()
        for event in events:
            _, created = CommunityEvent.objects.update_or_create(
                event_id=event.event_id,
                defaults=event.model_fields(),
            )
            if created:
                added[event.source_platform] += 1
            else:
                updated[event.source_platform] += 1
        return added, updated

    def _remove_expired(self, today: date) -> int:
        cutoff = window_start(today)
        expired = CommunityEvent.objects.filter(
            Q(date_end__isnull=True, date_start__lt=cutoff) | Q(date_end__lt=cutoff)
        )
        removed, _ = expired.delete()
        return removed
