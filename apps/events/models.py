from django.db import models
from django.utils import timezone
import uuid


class EventType(models.TextChoices):
    WEDDING = 'wedding', 'Wedding'
    TRADITIONAL_MARRIAGE = 'traditional_marriage', 'Traditional marriage'
    BURIAL = 'burial', 'Burial'
    MEMORIAL = 'memorial', 'Memorial'
    CHILD_DEDICATION = 'child_dedication', 'Child dedication'
    CHRISTENING = 'christening', 'Christening'
    NAMING = 'naming', 'Naming ceremony'
    THANKSGIVING = 'thanksgiving', 'Thanksgiving'
    ANNIVERSARY = 'anniversary', 'Anniversary'
    BIRTHDAY = 'birthday', 'Birthday'
    OTHER_CEREMONY = 'other_ceremony', 'Other ceremony'


class CommunityEvent(models.Model):
    """
    A public ceremony found by the scrapers.

    Rental businesses use these as leads: who is getting married, buried or
    celebrating nearby, and how to reach them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Stable hash of title, day, state and source url
    event_id = models.CharField(max_length=40, unique=True)
    event_type = models.CharField(
        max_length=30,
        choices=EventType.choices,
        default=EventType.OTHER_CEREMONY,
    )
    title = models.CharField(max_length=200)
    date_start = models.DateField()
    date_end = models.DateField(null=True, blank=True)

    location_raw = models.CharField(max_length=300, blank=True)
    location_state = models.CharField(max_length=50, blank=True)
    location_city_lga = models.CharField(max_length=100, blank=True)
    venue_name = models.CharField(max_length=200, blank=True)

    contact_name = models.CharField(max_length=100, blank=True)
    contact_role = models.CharField(max_length=100, blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    contact_email = models.EmailField(max_length=254, blank=True)
    organizer_org = models.CharField(max_length=200, blank=True)
    organizer_social = models.CharField(max_length=500, blank=True)

    source_platform = models.CharField(max_length=100)
    source_url = models.URLField(max_length=1000)
    source_published_at = models.DateField(null=True, blank=True)
    extracted_at = models.DateTimeField(default=timezone.now)
    confidence = models.FloatField(default=0.6)
    notes = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'community_events'
        ordering = ['date_start', 'title']
        indexes = [
            models.Index(fields=['event_type', 'date_start'], name='events_type_start_idx'),
            models.Index(fields=['location_state', 'date_start'], name='events_state_start_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.date_start})"


class EventSourceLog(models.Model):
    """Outcome of one scraper in one scraping run."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    run_at = models.DateTimeField(default=timezone.now)
    source_platform = models.CharField(max_length=100)
    source_url = models.URLField(max_length=1000, blank=True)
    events_found = models.PositiveIntegerField(default=0)
    events_added = models.PositiveIntegerField(default=0)
    events_updated = models.PositiveIntegerField(default=0)
    events_removed = models.PositiveIntegerField(default=0)
    errors = models.JSONField(default=list, blank=True)
    total_active = models.PositiveIntegerField(default=0)
    execution_time_ms = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'event_source_logs'
        ordering = ['-run_at']
        indexes = [
            models.Index(fields=['source_platform', 'run_at'], name='event_logs_source_run_idx'),
        ]

    def __str__(self):
        return f"{self.source_platform} @ {self.run_at:%Y-%m-%d %H:%M}"
