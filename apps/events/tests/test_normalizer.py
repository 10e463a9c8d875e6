import pytest
from datetime import date, timedelta
from apps.events.models import EventType
from apps.events.normalizer import (
    EventDateError,
    are_events_duplicate,
    calculate_confidence,
    deduplicate_events,
    generate_event_id,
    is_event_in_window,
    normalize_event,
    normalize_phone,
    normalize_state,
    parse_event_date,
)
from apps.events.scrapers import RawEvent, classify_event_type

TODAY = date(2025, 11, 20)


def _raw(**fields):
    defaults = {
        'event_type': EventType.WEDDING,
        'title': 'Wedding of Tolu and Ada',
        'date_start': '2025-12-06',
        'source_platform': 'Static',
        'source_url': 'https://example.com/e/1',
    }
    defaults.update(fields)
    return RawEvent(**defaults)


class TestParseEventDate:

    @pytest.mark.parametrize('value, expected', [
        ('2025-12-07', date(2025, 12, 7)),
        ('2025-12-07T14:00:00+01:00', date(2025, 12, 7)),
        ('07/12/2025', date(2025, 12, 7)),
        ('7-12-2025', date(2025, 12, 7)),
        ('7th December 2025', date(2025, 12, 7)),
        ('December 7, 2025', date(2025, 12, 7)),
        ('Saturday, 6th Dec 2025', date(2025, 12, 6)),
        ('Thursday 1st January 2026', date(2026, 1, 1)),
    ])
    def test_formats(self, value, expected):
        assert parse_event_date(value, TODAY) == expected

    def test_next_week(self):
        assert parse_event_date('next week', TODAY) == TODAY + timedelta(days=7)

    def test_next_weekday_defaults_to_a_week(self):
        assert parse_event_date('Next Sunday', TODAY) == TODAY + timedelta(days=7)

    def test_next_month_clamps_day(self):
        assert parse_event_date('next month', date(2025, 1, 31)) == date(2025, 2, 28)

    @pytest.mark.parametrize('value', ['', 'soon', 'Sat 3pm', '31/02/2025'])
    def test_unparseable(self, value):
        with pytest.raises(EventDateError):
            parse_event_date(value, TODAY)


class TestNormalizeFields:

    def test_state_from_location(self):
        assert normalize_state('', 'Civic Centre, Lekki') == 'Lagos'
        assert normalize_state('Rivers State', '') == 'Rivers'
        assert normalize_state('', 'Wuse 2, Abuja') == 'FCT'

    def test_nigeria_is_not_niger(self):
        assert normalize_state('', 'Somewhere, Nigeria') == ''

    def test_phone_to_e164(self):
        assert normalize_phone('0803 123 4567') == '+2348031234567'
        assert normalize_phone('+234 803 123 4567') == '+2348031234567'
        assert normalize_phone('12345') == '12345'
        assert normalize_phone('') == ''

    def test_event_id_is_stable(self):
        first = generate_event_id('Wedding ', date(2025, 12, 6), 'Lagos', 'HTTPS://x.com/E')
        second = generate_event_id('wedding', date(2025, 12, 6), 'lagos', 'https://x.com/e')

        assert first == second
        assert first.startswith('evt_')
        assert len(first) == 36

    def test_confidence(self):
        assert calculate_confidence(_raw(date_start='next week')) == 0.6
        assert calculate_confidence(_raw()) == 0.7
        assert calculate_confidence(_raw(
            venue_name='Hall',
            contact_name='Tolu',
            contact_phone='08031234567',
            location_state='Lagos',
        )) == 0.95

    def test_classify_event_type(self):
        assert classify_event_type('Traditional Marriage of Ada') == EventType.TRADITIONAL_MARRIAGE
        assert classify_event_type('Funeral service for Papa') == EventType.BURIAL
        assert classify_event_type('Baby dedication') == EventType.CHILD_DEDICATION
        assert classify_event_type('Concert') == EventType.OTHER_CEREMONY

    def test_normalize_event(self):
        event = normalize_event(_raw(
            title='  Wedding of Tolu and Ada  ',
            location_raw='Festac Town',
            contact_email='Tolu@Example.COM ',
        ), TODAY)

        assert event.title == 'Wedding of Tolu and Ada'
        assert event.location_state == 'Lagos'
        assert event.contact_email == 'tolu@example.com'
        assert event.date_start == date(2025, 12, 6)
        assert 'event_id' not in event.model_fields()


class TestDeduplication:

    def test_similar_titles_same_state_are_duplicates(self):
        first = normalize_event(_raw(location_raw='Lagos'), TODAY)
        second = normalize_event(_raw(
            title='Wedding of Tolu and Adah',
            date_start='2025-12-07',
            location_raw='Ikeja',
            source_url='https://other.com/e/9',
        ), TODAY)

        assert are_events_duplicate(first, second) is True

    def test_different_state_is_not_duplicate(self):
        first = normalize_event(_raw(location_raw='Lagos'), TODAY)
        second = normalize_event(_raw(location_raw='Kano', source_url='https://other.com/e/9'), TODAY)

        assert are_events_duplicate(first, second) is False

    def test_keeps_highest_confidence(self):
        plain = normalize_event(_raw(location_raw='Lagos'), TODAY)
        rich = normalize_event(_raw(
            location_raw='Lagos',
            venue_name='Holy Family',
            source_url='https://other.com/e/9',
        ), TODAY)

        unique = deduplicate_events([plain, rich])

        assert unique == [rich]


class TestWindow:

    def test_window_keeps_last_eight_days(self):
        recent = normalize_event(_raw(date_start='2025-11-12'), TODAY)
        old = normalize_event(_raw(date_start='2025-11-11'), TODAY)

        assert is_event_in_window(recent, TODAY) is True
        assert is_event_in_window(old, TODAY) is False

    def test_end_date_is_used(self):
        event = normalize_event(_raw(date_start='2025-11-01', date_end='2025-11-15'), TODAY)

        assert is_event_in_window(event, TODAY) is True
