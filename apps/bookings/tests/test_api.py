import pytest
from datetime import timedelta
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.billing.models import Subscription, SubscriptionPlan
from apps.bookings.models import Booking, BookingStatus, Payment


def _payload(customer, start, end, lines, **extra):
    return {
        'customer_id': str(customer.id),
        'start_date': start.isoformat(),
        'end_date': end.isoformat(),
        'items': [{'item_id': str(item.id), 'quantity': quantity} for item, quantity in lines],
        **extra,
    }


# =============================================================================
# Booking CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestBookingList:
    """Tests for GET /api/bookings/"""

    def test_list_returns_own_bookings(self, owner_client, booking):
        url = reverse('bookings:booking-list')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        ids = [b['id'] for b in response.data['results']]
        assert str(booking.id) in ids

    def test_list_hides_other_owners_bookings(self, other_client, booking):
        url = reverse('bookings:booking-list')
        response = other_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'] == []

    def test_list_unauthenticated(self, api_client):
        url = reverse('bookings:booking-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_filter_by_status(self, owner_client, make_booking, booking, chairs, start_day):
        make_booking(start_day, start_day, [(chairs, 1)], status=BookingStatus.RETURNED)

        url = reverse('bookings:booking-list')
        response = owner_client.get(url, {'status': 'RETURNED'})

        assert response.status_code == status.HTTP_200_OK
        assert [b['status'] for b in response.data['results']] == ['RETURNED']

    def test_rentals_alias_lists_same_bookings(self, owner_client, booking):
        url = reverse('bookings:rental-list')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['results'][0]['id'] == str(booking.id)


@pytest.mark.django_db
class TestBookingCreate:
    """Tests for POST /api/bookings/"""

    def test_create_booking(self, owner_client, customer, chairs, start_day):
        url = reverse('bookings:booking-list')
        data = _payload(
            customer, start_day, start_day + timedelta(days=1), [(chairs, 10)],
            total_price='5000.00',
            advance_payment='1000.00',
        )
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['customer_name'] == 'Ada Obi'
        assert response.data['items'][0]['quantity'] == 10
        assert response.data['balance']['remaining_balance'] == '4000.00'

    def test_create_same_day_booking(self, owner_client, customer, chairs, start_day):
        url = reverse('bookings:booking-list')
        response = owner_client.post(url, _payload(customer, start_day, start_day, [(chairs, 1)]), format='json')

        assert response.status_code == status.HTTP_201_CREATED

    def test_create_overbooked_returns_409(self, owner_client, customer, chairs, booking, start_day):
        url = reverse('bookings:booking-list')
        data = _payload(customer, start_day, start_day, [(chairs, 11)])
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['item_name'] == 'Chair'
        assert response.data['available'] == 10
        assert response.data['date'] == start_day.isoformat()

    def test_create_draft_returns_400(self, owner_client, customer, chairs, start_day):
        url = reverse('bookings:booking-list')
        data = _payload(customer, start_day, start_day, [(chairs, 1)], status='DRAFT')
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_with_unknown_customer_returns_404(self, other_client, customer, other_item, start_day):
        url = reverse('bookings:booking-list')
        data = _payload(customer, start_day, start_day, [(other_item, 1)])
        response = other_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_without_items_returns_400(self, owner_client, customer, start_day):
        url = reverse('bookings:booking-list')
        response = owner_client.post(url, _payload(customer, start_day, start_day, []), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_with_bad_date_returns_400(self, owner_client, customer, chairs, start_day):
        url = reverse('bookings:booking-list')
        data = _payload(customer, start_day, start_day, [(chairs, 1)])
        data['start_date'] = 'next tuesday'
        response = owner_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'start_date' in response.data


@pytest.mark.django_db
class TestBookingUpdate:
    """Tests for PUT and PATCH /api/bookings/{id}/"""

    def test_put_replaces_lines(self, owner_client, booking, customer, tables, start_day):
        url = reverse('bookings:booking-detail', kwargs={'pk': booking.id})
        data = _payload(customer, start_day, start_day, [(tables, 5)], total_price='1000.00', advance_payment='200.00')
        response = owner_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [line['name'] for line in response.data['items']] == ['Table']

    def test_patch_status(self, owner_client, booking):
        url = reverse('bookings:booking-detail', kwargs={'pk': booking.id})
        response = owner_client.patch(url, {'status': 'OUT'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'OUT'

    def test_patch_invalid_color(self, owner_client, booking):
        url = reverse('bookings:booking-detail', kwargs={'pk': booking.id})
        response = owner_client.patch(url, {'color': 'red'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patch_other_owners_booking(self, other_client, booking):
        url = reverse('bookings:booking-detail', kwargs={'pk': booking.id})
        response = other_client.patch(url, {'status': 'OUT'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestBookingDelete:

    def test_delete_booking_removes_payments(self, owner_client, booking):
        Payment.objects.create(booking=booking, amount=Decimal('10.00'))

        url = reverse('bookings:booking-detail', kwargs={'pk': booking.id})
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Payment.objects.exists()

    def test_bulk_delete(self, owner_client, booking):
        url = reverse('bookings:booking-bulk-delete')
        response = owner_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert not Booking.objects.exists()


# =============================================================================
# Payments, balance and receipt
# =============================================================================

@pytest.mark.django_db
class TestBookingPayments:
    """Tests for /api/bookings/{id}/payments/"""

    def test_record_payment(self, owner_client, booking):
        url = reverse('bookings:booking-payments', kwargs={'pk': booking.id})
        response = owner_client.post(url, {'amount': '300.00', 'notes': 'transfer'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['amount'] == '300.00'
        assert response.data['source'] == 'manual'

    def test_payment_above_balance_returns_400(self, owner_client, booking):
        url = reverse('bookings:booking-payments', kwargs={'pk': booking.id})
        response = owner_client.post(url, {'amount': '900.00'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['remaining_balance'] == '800.00'
        assert response.data['attempted_payment'] == '900.00'

    def test_zero_payment_returns_400(self, owner_client, booking):
        url = reverse('bookings:booking-payments', kwargs={'pk': booking.id})
        response = owner_client.post(url, {'amount': '0'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_payments_newest_first(self, owner_client, booking):
        older = Payment.objects.create(booking=booking, amount=Decimal('10.00'))
        newer = Payment.objects.create(
            booking=booking,
            amount=Decimal('20.00'),
            payment_date=older.payment_date + timedelta(hours=1),
        )

        url = reverse('bookings:booking-payments', kwargs={'pk': booking.id})
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data] == [str(newer.id), str(older.id)]

    def test_balance(self, owner_client, booking):
        url = reverse('bookings:booking-balance', kwargs={'pk': booking.id})
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_paid'] == '200.00'
        assert response.data['remaining_balance'] == '800.00'

    def test_receipt(self, owner_client, booking):
        url = reverse('bookings:booking-receipt', kwargs={'pk': booking.id})
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['receipt_number'] == 'RCP-WED-001'
        assert response.data['customer']['name'] == 'Ada Obi'
        assert response.data['business']['name'] == 'Rental Owner'


# =============================================================================
# Calendar and day views
# =============================================================================

@pytest.mark.django_db
class TestCalendarViews:

    def test_calendar_events(self, owner_client, booking, start_day):
        url = reverse('bookings:booking-calendar')
        response = owner_client.get(url, {
            'start': start_day.isoformat(),
            'end': (start_day + timedelta(days=7)).isoformat(),
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['end'] == (start_day + timedelta(days=3)).isoformat()
        assert response.data[0]['extendedProps']['customerId'] == str(booking.customer_id)

    def test_calendar_requires_window(self, owner_client):
        url = reverse('bookings:booking-calendar')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_day_view(self, owner_client, booking, start_day):
        url = reverse('bookings:booking-day')
        response = owner_client.get(url, {'date': start_day.isoformat()})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['items'][0]['remaining'] == 10

    def test_day_view_requires_date(self, owner_client):
        url = reverse('bookings:booking-day')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Export
# =============================================================================

@pytest.mark.django_db
class TestBookingExport:

    def test_export_requires_premium(self, owner_client, booking):
        url = reverse('bookings:booking-export')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_export_csv(self, owner_client, owner, booking):
        Subscription.objects.create(user=owner, plan=SubscriptionPlan.PRO)

        url = reverse('bookings:booking-export')
        response = owner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/csv')
        body = response.content.decode()
        assert 'WED-001' in body
        assert 'Chair x40' in body


# =============================================================================
# Public availability
# =============================================================================

@pytest.mark.django_db
class TestPublicAvailability:
    """Tests for POST /api/public/{slug}/availability/"""

    def test_availability_for_range(self, api_client, public_page, booking, chairs, tables, other_item, start_day):
        url = reverse('bookings:public-availability', kwargs={'slug': public_page.slug})
        response = api_client.post(url, {
            'start_date': start_day.isoformat(),
            'end_date': (start_day + timedelta(days=5)).isoformat(),
            'item_ids': [str(chairs.id), str(tables.id), str(other_item.id)],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        by_name = {item['name']: item for item in response.data['items']}
        assert set(by_name) == {'Chair', 'Table'}
        assert by_name['Chair']['booked_quantity'] == 40
        assert by_name['Chair']['available_quantity'] == 10
        assert by_name['Table']['is_available'] is True

    def test_inactive_page_returns_404(self, api_client, public_page, chairs, start_day):
        public_page.is_active = False
        public_page.save()

        url = reverse('bookings:public-availability', kwargs={'slug': public_page.slug})
        response = api_client.post(url, {
            'start_date': start_day.isoformat(),
            'end_date': start_day.isoformat(),
            'item_ids': [str(chairs.id)],
        }, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reversed_range_returns_400(self, api_client, public_page, chairs, start_day):
        url = reverse('bookings:public-availability', kwargs={'slug': public_page.slug})
        response = api_client.post(url, {
            'start_date': start_day.isoformat(),
            'end_date': (start_day - timedelta(days=1)).isoformat(),
            'item_ids': [str(chairs.id)],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
