"""
Management command to run the event scrapers.

Usage:
    python manage.py scrape_events
    python manage.py scrape_events --source Eventbrite
"""

from django.core.management.base import BaseCommand, CommandError

from apps.events.services import EventScraperManager, ScraperNotFoundError


class Command(BaseCommand):
    help = 'Scrape community events and refresh the events feed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--source',
            help='Only run the scraper with this platform name',
        )

    def handle(self, *args, **options):
        manager = EventScraperManager()
        source = options.get('source')

        try:
            summary = manager.run_single(source) if source else manager.run_all()
        except ScraperNotFoundError as e:
            raise CommandError(f"{e}. Available: {', '.join(manager.platforms)}")

        self.stdout.write(
            f"Found {summary['events_found']} event(s): "
            f"{summary['total_added']} added, {summary['total_updated']} updated, "
            f"{summary['total_removed']} removed"
        )
        for error in summary['errors']:
            self.stdout.write(self.style.WARNING(f"  {error}"))
        self.stdout.write(self.style.SUCCESS(f"{summary['total_active']} active event(s)"))
