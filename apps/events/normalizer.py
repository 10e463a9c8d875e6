"""
Normalization of scraped events.

Turns loosely formatted scraper output into clean records: calendar dates,
official state names, E.164 phone numbers, a stable id and a confidence
score. Also decides which records are duplicates and which are recent
enough to keep.
"""

import calendar
import hashlib
import re
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import List, Optional

from django.utils import timezone
from fuzzywuzzy import fuzz

from apps.core.dates import utc_today
from .scrapers.base import RawEvent

NIGERIA_STATES = (
    'Abia', 'Adamawa', 'Akwa Ibom', 'Anambra', 'Bauchi', 'Bayelsa', 'Benue',
    'Borno', 'Cross River', 'Delta', 'Ebonyi', 'Edo', 'Ekiti', 'Enugu', 'FCT',
    'Gombe', 'Imo', 'Jigawa', 'Kaduna', 'Kano', 'Katsina', 'Kebbi', 'Kogi',
    'Kwara', 'Lagos', 'Nasarawa', 'Niger', 'Ogun', 'Ondo', 'Osun', 'Oyo',
    'Plateau', 'Rivers', 'Sokoto', 'Taraba', 'Yobe', 'Zamfara',
)

CITY_TO_STATE = {
    'festac': 'Lagos',
    'ikeja': 'Lagos',
    'lekki': 'Lagos',
    'yaba': 'Lagos',
    'surulere': 'Lagos',
    'abuja': 'FCT',
    'wuse': 'FCT',
    'garki': 'FCT',
    'maitama': 'FCT',
    'port harcourt': 'Rivers',
    'calabar': 'Cross River',
    'ibadan': 'Oyo',
    'aba': 'Abia',
    'onitsha': 'Anambra',
    'warri': 'Delta',
    'benin': 'Edo',
    'jos': 'Plateau',
    'maiduguri': 'Borno',
}

TEXT_DATE_FORMATS = ('%d %B %Y', '%d %b %Y', '%B %d %Y', '%b %d %Y')
WEEKDAY_PATTERN = re.compile(
    r'\b(mon|tue|tues|wed|thu|thur|thurs|fri|sat|sun)(day|nesday|urday|sday)?\b',
    re.IGNORECASE,
)
ORDINAL_PATTERN = re.compile(r'(\d{1,2})(st|nd|rd|th)\b', re.IGNORECASE)
NUMERIC_DATE_PATTERN = re.compile(r'(\d{1,2})[/-](\d{1,2})[/-](\d{4})')
ISO_DATE_PATTERN = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')

# Events that ended before today minus this many days are dropped
WINDOW_DAYS = 8

DUPLICATE_TITLE_RATIO = 90

MAX_CONFIDENCE = 0.95


class EventDateError(ValueError):
    """Raised when a scraped date cannot be read."""
    pass


@dataclass
class NormalizedEvent:
    event_id: str
    event_type: str
    title: str
    date_start: date
    date_end: Optional[date]
    location_raw: str
    location_state: str
    location_city_lga: str
    venue_name: str
    contact_name: str
    contact_role: str
    contact_phone: str
    contact_email: str
    organizer_org: str
    organizer_social: str
    source_platform: str
    source_url: str
    source_published_at: Optional[date]
    extracted_at: datetime
    confidence: float
    notes: str

    def model_fields(self) -> dict:
        """Field values for CommunityEvent, without the lookup key."""
        fields = asdict(self)
        fields.pop('event_id')
        return fields


def _add_month(day: date) -> date:
    year = day.year + day.month // 12
    month = day.month % 12 + 1
    return day.replace(year=year, month=month, day=min(day.day, calendar.monthrange(year, month)[1]))


def parse_event_date(value: str, today: Optional[date] = None) -> date:
    """
    Read the date formats seen on Nigerian event listings.

    Supported: ``2025-12-07``, ``07/12/2025`` (day first),
    ``7th December 2025``, ``December 7, 2025``, ``Saturday, 7th Dec 2025``
    and relative ``next week`` / ``next month`` / ``next <anything>``.

    Raises:
        EventDateError: If nothing matches
    """
    if not value or not value.strip():
        raise EventDateError("Missing date")

    text = value.strip()
    lowered = text.lower()
    today = today or utc_today()

    iso = ISO_DATE_PATTERN.match(text)
    if iso:
        try:
            return date(*(int(part) for part in iso.groups()))
        except ValueError:
            raise EventDateError(f"Unable to parse date: {value}")

    if 'next month' in lowered:
        return _add_month(today)
    if 'next' in lowered.split():
        return today + timedelta(days=7)

    numeric = NUMERIC_DATE_PATTERN.search(text)
    if numeric:
        day, month, year = (int(part) for part in numeric.groups())
        try:
            return date(year, month, day)
        except ValueError:
            raise EventDateError(f"Unable to parse date: {value}")

    cleaned = ORDINAL_PATTERN.sub(r'\1', text)
    cleaned = WEEKDAY_PATTERN.sub('', cleaned)
    cleaned = ' '.join(cleaned.replace(',', ' ').split())
    for fmt in TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    raise EventDateError(f"Unable to parse date: {value}")


def normalize_state(state: str = '', location_raw: str = '') -> str:
    """
    Official state name found in ``state`` or ``location_raw``, else ``''``.

    State names are matched as whole words so "Nigeria" does not read as Niger.
    """
    search_text = f"{state or ''} {location_raw or ''}".lower()
    if not search_text.strip():
        return ''

    for name in NIGERIA_STATES:
        if re.search(rf'\b{re.escape(name.lower())}\b', search_text):
            return name
    for city, name in CITY_TO_STATE.items():
        if re.search(rf'\b{re.escape(city)}\b', search_text):
            return name
    return ''


def normalize_phone(phone: str) -> str:
    """``0803 123 4567`` -> ``+2348031234567``; other numbers are only trimmed."""
    if not phone:
        return ''
    digits = re.sub(r'\D', '', phone)
    if digits.startswith('0') and len(digits) == 11:
        return f"+234{digits[1:]}"
    if digits.startswith('234') and len(digits) == 13:
        return f"+{digits}"
    return phone.strip()[:20]


def clean_text(value: Optional[str], max_length: int) -> str:
    return (value or '').strip()[:max_length]


def generate_event_id(title: str, date_start: date, state: str, source_url: str) -> str:
    hash_input = '|'.join([
        title.lower().strip(),
        date_start.isoformat(),
        state.lower(),
        source_url.lower().strip(),
    ])
    return f"evt_{hashlib.sha256(hash_input.encode('utf-8')).hexdigest()[:32]}"


def calculate_confidence(raw: RawEvent) -> float:
    """Score how complete and precise a record is, from 0.6 up to 0.95."""
    confidence = 0.6
    if raw.date_start and 'next' not in raw.date_start.lower():
        confidence += 0.1
    if raw.venue_name:
        confidence += 0.05
    if raw.contact_name and (raw.contact_phone or raw.contact_email):
        confidence += 0.15
    if raw.location_state:
        confidence += 0.05
    return round(min(confidence, MAX_CONFIDENCE), 2)


def normalize_event(raw: RawEvent, today: Optional[date] = None) -> NormalizedEvent:
    """
    Raises:
        EventDateError: If the start date cannot be read
    """
    date_start = parse_event_date(raw.date_start, today)
    date_end = parse_event_date(raw.date_end, today) if raw.date_end else None
    published = parse_event_date(raw.source_published_at, today) if raw.source_published_at else None
    state = normalize_state(raw.location_state, raw.location_raw)
    source_url = raw.source_url.strip()

    return NormalizedEvent(
        event_id=generate_event_id(raw.title, date_start, state, source_url),
        event_type=raw.event_type,
        title=clean_text(raw.title, 200),
        date_start=date_start,
        date_end=date_end,
        location_raw=clean_text(raw.location_raw, 300),
        location_state=state,
        location_city_lga=clean_text(raw.location_city_lga, 100),
        venue_name=clean_text(raw.venue_name, 200),
        contact_name=clean_text(raw.contact_name, 100),
        contact_role=clean_text(raw.contact_role, 100),
        contact_phone=normalize_phone(raw.contact_phone),
        contact_email=clean_text(raw.contact_email, 254).lower(),
        organizer_org=clean_text(raw.organizer_org, 200),
        organizer_social=clean_text(raw.organizer_social, 500),
        source_platform=clean_text(raw.source_platform, 100),
        source_url=source_url[:1000],
        source_published_at=published,
        extracted_at=timezone.now(),
        confidence=calculate_confidence(raw),
        notes=clean_text(raw.notes, 500),
    )


def are_events_duplicate(first: NormalizedEvent, second: NormalizedEvent) -> bool:
    """Same id, or near-identical titles a day or less apart in the same state."""
    if first.event_id == second.event_id:
        return True
    similar_title = fuzz.ratio(first.title.lower(), second.title.lower()) >= DUPLICATE_TITLE_RATIO
    close_dates = abs((first.date_start - second.date_start).days) <= 1
    return similar_title and close_dates and first.location_state == second.location_state


def deduplicate_events(events: List[NormalizedEvent]) -> List[NormalizedEvent]:
    """Collapse duplicates, keeping the record with the highest confidence."""
    unique: List[NormalizedEvent] = []
    for event in events:
        for index, kept in enumerate(unique):
            if are_events_duplicate(kept, event):
                if event.confidence > kept.confidence:
                    unique[index] = event
                break
        else:
            unique.append(event)
    return unique


def window_start(today: Optional[date] = None) -> date:
    """First day kept: seven days before yesterday."""
    return (today or utc_today()) - timedelta(days=WINDOW_DAYS)


def is_event_in_window(event: NormalizedEvent, today: Optional[date] = None) -> bool:
    return (event.date_end or event.date_start) >= window_start(today)
