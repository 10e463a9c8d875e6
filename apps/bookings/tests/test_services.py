import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from datetime import timedelta
from decimal import Decimal
from apps.bookings.models import Booking, BookingStatus, Payment, PaymentSource
from apps.bookings.services import (
    reserved_by_day,
    peak_reserved,
    check_item_availability,
    create_booking,
    update_booking,
    update_booking_status,
    get_balance,
    record_payment,
    get_calendar_events,
    get_day_summary,
    build_receipt,
    receipt_number,
    BookingValidationError,
    InvalidBookingStatusError,
    RelatedObjectNotFoundError,
    InsufficientAvailabilityError,
    PaymentsExceedTotalError,
    PaymentExceedsBalanceError,
)
from apps.core.dates import utc_today


# =============================================================================
# Availability
# =============================================================================

@pytest.mark.django_db
class TestAvailability:

    def test_reserved_by_day_counts_inclusive_days(self, booking, chairs, start_day):
        reserved = reserved_by_day(
            item=chairs,
            start_date=start_day - timedelta(days=1),
            end_date=start_day + timedelta(days=3),
        )

        assert reserved[start_day - timedelta(days=1)] == 0
        assert reserved[start_day] == 40
        assert reserved[start_day + timedelta(days=2)] == 40
        assert reserved[start_day + timedelta(days=3)] == 0

    def test_inactive_bookings_hold_no_stock(self, make_booking, chairs, start_day):
        make_booking(start_day, start_day, [(chairs, 50)], status=BookingStatus.RETURNED)
        make_booking(start_day, start_day, [(chairs, 50)], status=BookingStatus.CANCELLED)

        assert peak_reserved(item=chairs, start_date=start_day, end_date=start_day) == 0

    def test_peak_is_busiest_single_day(self, make_booking, chairs, start_day):
        make_booking(start_day, start_day + timedelta(days=1), [(chairs, 20)])
        make_booking(start_day + timedelta(days=1), start_day + timedelta(days=2), [(chairs, 15)])

        peak = peak_reserved(item=chairs, start_date=start_day, end_date=start_day + timedelta(days=2))

        assert peak == 35

    def test_shortfall_reports_first_day(self, booking, chairs, start_day):
        with pytest.raises(InsufficientAvailabilityError) as exc_info:
            check_item_availability(
                item=chairs,
                quantity=20,
                start_date=start_day - timedelta(days=2),
                end_date=start_day + timedelta(days=1),
            )

        error = exc_info.value
        assert error.date == start_day
        assert error.available == 10
        assert error.reserved == 40
        assert error.total == 50
        assert error.status_code == 409
        assert error.as_dict()['item_name'] == 'Chair'

    def test_back_to_back_bookings_fit(self, booking, chairs, start_day):
        check_item_availability(
            item=chairs,
            quantity=50,
            start_date=start_day + timedelta(days=3),
            end_date=start_day + timedelta(days=5),
        )

    def test_excluded_booking_is_ignored(self, booking, chairs, start_day):
        check_item_availability(
            item=chairs,
            quantity=50,
            start_date=start_day,
            end_date=start_day,
            exclude_booking_id=booking.id,
        )


# =============================================================================
# Create / update / status
# =============================================================================

@pytest.mark.django_db
class TestCreateBooking:

    def test_create_booking_with_lines_and_payments(self, owner, customer, chairs, tables, start_day):
        booking = create_booking(
            owner=owner,
            customer_id=customer.id,
            start_date=start_day.isoformat(),
            end_date=(start_day + timedelta(days=1)).isoformat(),
            items=[
                {'item_id': chairs.id, 'quantity': 30},
                {'item_id': tables.id, 'quantity': 4},
            ],
            total_price=Decimal('800.00'),
            advance_payment=Decimal('100.00'),
            initial_payments=[{'amount': Decimal('150.00'), 'notes': 'cash'}],
        )

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.items.count() == 2
        assert booking.payments.count() == 1
        assert booking.color.startswith('#')
        assert get_balance(booking)['remaining_balance'] == Decimal('550.00')

    def test_time_part_is_ignored(self, owner, customer, chairs, start_day):
        booking = create_booking(
            owner=owner,
            customer_id=customer.id,
            start_date=f'{start_day.isoformat()}T23:30:00-05:00',
            end_date=f'{start_day.isoformat()}T00:00:00Z',
            items=[{'item_id': chairs.id, 'quantity': 1}],
        )

        assert booking.start_date == start_day
        assert booking.end_date == start_day

    def test_draft_rejected(self, owner, customer, chairs, start_day):
        with pytest.raises(InvalidBookingStatusError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day,
                items=[{'item_id': chairs.id, 'quantity': 1}],
                status=BookingStatus.DRAFT,
            )

    def test_end_before_start_rejected(self, owner, customer, chairs, start_day):
        with pytest.raises(BookingValidationError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day - timedelta(days=1),
                items=[{'item_id': chairs.id, 'quantity': 1}],
            )

    def test_more_than_a_year_ahead_rejected(self, owner, customer, chairs):
        far = utc_today() + timedelta(days=400)
        with pytest.raises(BookingValidationError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=far,
                end_date=far,
                items=[{'item_id': chairs.id, 'quantity': 1}],
            )

    def test_duplicate_item_rejected(self, owner, customer, chairs, start_day):
        with pytest.raises(BookingValidationError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day,
                items=[
                    {'item_id': chairs.id, 'quantity': 1},
                    {'item_id': chairs.id, 'quantity': 2},
                ],
            )

    def test_item_of_other_owner_not_found(self, owner, customer, other_item, start_day):
        with pytest.raises(RelatedObjectNotFoundError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day,
                items=[{'item_id': other_item.id, 'quantity': 1}],
            )

    def test_overbooking_rejected(self, owner, customer, chairs, booking, start_day):
        with pytest.raises(InsufficientAvailabilityError):
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day + timedelta(days=2),
                end_date=start_day + timedelta(days=4),
                items=[{'item_id': chairs.id, 'quantity': 11}],
            )
        assert Booking.objects.count() == 1

    def test_payments_above_total_rejected(self, owner, customer, chairs, start_day):
        with pytest.raises(PaymentsExceedTotalError) as exc_info:
            create_booking(
                owner=owner,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day,
                items=[{'item_id': chairs.id, 'quantity': 1}],
                total_price=Decimal('100.00'),
                advance_payment=Decimal('60.00'),
                initial_payments=[{'amount': Decimal('50.00')}],
            )

        assert exc_info.value.as_dict()['total_payments'] == '110.00'


@pytest.mark.django_db
class TestUpdateBooking:

    def test_update_ignores_own_lines(self, booking, customer, chairs, start_day):
        updated = update_booking(
            booking=booking,
            customer_id=customer.id,
            start_date=start_day,
            end_date=start_day + timedelta(days=3),
            items=[{'item_id': chairs.id, 'quantity': 50}],
            total_price=Decimal('1200.00'),
            advance_payment=Decimal('200.00'),
        )

        assert updated.end_date == start_day + timedelta(days=3)
        assert updated.items.get().quantity == 50

    def test_total_cannot_drop_below_paid(self, booking, customer, chairs, start_day):
        Payment.objects.create(booking=booking, amount=Decimal('500.00'))

        with pytest.raises(PaymentsExceedTotalError):
            update_booking(
                booking=booking,
                customer_id=customer.id,
                start_date=start_day,
                end_date=start_day,
                items=[{'item_id': chairs.id, 'quantity': 1}],
                total_price=Decimal('600.00'),
                advance_payment=Decimal('200.00'),
            )


@pytest.mark.django_db
class TestUpdateBookingStatus:

    def test_returned_frees_stock(self, booking, chairs, start_day):
        update_booking_status(booking=booking, status=BookingStatus.RETURNED)

        assert peak_reserved(item=chairs, start_date=start_day, end_date=start_day) == 0

    def test_reactivation_rechecks_availability(self, make_booking, booking, chairs, start_day):
        booking.status = BookingStatus.CANCELLED
        booking.save()
        make_booking(start_day, start_day, [(chairs, 20)])

        with pytest.raises(InsufficientAvailabilityError):
            update_booking_status(booking=booking, status=BookingStatus.CONFIRMED)

    def test_color_only(self, booking):
        updated = update_booking_status(booking=booking, color='#123456')

        assert updated.color == '#123456'
        assert updated.status == BookingStatus.CONFIRMED

    def test_draft_rejected(self, booking):
        with pytest.raises(InvalidBookingStatusError):
            update_booking_status(booking=booking, status=BookingStatus.DRAFT)


# =============================================================================
# Balance and payments
# =============================================================================

@pytest.mark.django_db
class TestPayments:

    def test_balance_formula(self, booking):
        Payment.objects.create(booking=booking, amount=Decimal('300.00'))

        balance = get_balance(booking)

        assert balance['payments_total'] == Decimal('300.00')
        assert balance['total_paid'] == Decimal('500.00')
        assert balance['remaining_balance'] == Decimal('500.00')
        assert balance['is_fully_paid'] is False

    def test_balance_without_total(self, make_booking, chairs, start_day):
        booking = make_booking(start_day, start_day, [(chairs, 1)])

        balance = get_balance(booking)

        assert balance['remaining_balance'] is None
        assert balance['is_fully_paid'] is False

    def test_payment_up_to_balance_accepted(self, booking):
        record_payment(booking=booking, amount=Decimal('800.00'))

        assert get_balance(booking)['is_fully_paid'] is True

    def test_payment_above_balance_rejected(self, booking):
        with pytest.raises(PaymentExceedsBalanceError) as exc_info:
            record_payment(booking=booking, amount=Decimal('800.01'))

        assert exc_info.value.as_dict()['remaining_balance'] == '800.00'
        assert booking.payments.count() == 0

    def test_zero_payment_rejected(self, booking):
        with pytest.raises(BookingValidationError):
            record_payment(booking=booking, amount=Decimal('0'))

    def test_external_reference_is_idempotent(self, booking):
        first = record_payment(
            booking=booking,
            amount=Decimal('100.00'),
            source=PaymentSource.STRIPE,
            external_reference='pi_123',
        )
        second = record_payment(
            booking=booking,
            amount=Decimal('100.00'),
            source=PaymentSource.STRIPE,
            external_reference='pi_123',
        )

        assert first.id == second.id
        assert booking.payments.count() == 1

    def test_replayed_reference_is_checked_under_booking_lock(self, booking):
        replay = {'amount': Decimal('100.00'), 'source': PaymentSource.STRIPE, 'external_reference': 'pi_456'}
        record_payment(booking=booking, **replay)

        with CaptureQueriesContext(connection) as queries:
            record_payment(booking=booking, **replay)

        statements = [query['sql'] for query in queries.captured_queries]
        lock = next(i for i, sql in enumerate(statements) if 'FROM "bookings"' in sql)
        lookup = next(i for i, sql in enumerate(statements) if '"external_reference"' in sql)
        assert lock < lookup
        assert booking.payments.count() == 1

    def test_overpayment_allowed_for_processor_payments(self, booking):
        record_payment(booking=booking, amount=Decimal('900.00'), allow_overpayment=True)

        assert get_balance(booking)['remaining_balance'] == Decimal('-100.00')


# =============================================================================
# Calendar, day sheet and receipt
# =============================================================================

@pytest.mark.django_db
class TestCalendarFeed:

    def test_event_end_is_exclusive(self, owner, booking, start_day):
        events = get_calendar_events(user=owner, start=start_day, end=start_day + timedelta(days=30))

        assert len(events) == 1
        event = events[0]
        assert event['start'] == start_day.isoformat()
        assert event['end'] == (start_day + timedelta(days=3)).isoformat()
        assert event['allDay'] is True
        assert event['title'] == 'Ada - Chair ×40'
        assert event['extendedProps']['customerName'] == 'Ada Obi'

    def test_cancelled_bookings_left_out(self, owner, make_booking, chairs, start_day):
        make_booking(start_day, start_day, [(chairs, 1)], status=BookingStatus.CANCELLED)

        assert get_calendar_events(user=owner, start=start_day, end=start_day) == []

    def test_out_booking_without_color_is_red(self, owner, make_booking, chairs, start_day):
        make_booking(start_day, start_day, [(chairs, 1)], status=BookingStatus.OUT)

        event = get_calendar_events(user=owner, start=start_day, end=start_day)[0]

        assert event['backgroundColor'] == '#ef4444'

    def test_day_summary_remaining(self, owner, booking, chairs, tables, start_day):
        summary = get_day_summary(user=owner, day=start_day + timedelta(days=1))

        assert len(summary['bookings']) == 1
        by_name = {item['name']: item for item in summary['items']}
        assert by_name['Chair']['reserved'] == 40
        assert by_name['Chair']['remaining'] == 10
        assert by_name['Table']['remaining'] == 10

    def test_receipt(self, booking):
        Payment.objects.create(booking=booking, amount=Decimal('100.00'))

        receipt = build_receipt(booking=booking)

        assert receipt['receipt_number'] == 'RCP-WED-001'
        assert receipt['items'][0]['line_total'] == Decimal('20000.00')
        assert receipt['financial']['remaining_balance'] == Decimal('700.00')
        assert receipt['booking']['days'] == 3
        assert len(receipt['payments']) == 1

    def test_receipt_number_without_reference(self, booking):
        booking.reference = ''

        assert receipt_number(booking) == f"RCP-{str(booking.id)[:8].upper()}"
