import pytest
from django.urls import reverse
from rest_framework import status
from apps.billing.models import Subscription, SubscriptionPlan
from apps.customers.models import Customer
from apps.customers.services import to_title_case


class TestTitleCase:

    @pytest.mark.parametrize('value,expected', [
        ('ada', 'Ada'),
        ('  mary   jane ', 'Mary Jane'),
        ("mary-jane o'neil", "Mary-Jane O'Neil"),
        ('OBI', 'Obi'),
        ('', ''),
    ])
    def test_to_title_case(self, value, expected):
        assert to_title_case(value) == expected


@pytest.mark.django_db
class TestCustomerList:

    def test_only_own_customers(self, authenticated_client, ada, chidi, stranger):
        response = authenticated_client.get(reverse('customers:customer-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [row['name'] for row in response.data['results']] == ['Ada Obi', 'Chidi Eze']

    def test_ordered_by_name(self, authenticated_client, user):
        for first_name, last_name in [('Zainab', 'Bello'), ('Emeka', 'Obi'), ('Emeka', 'Adeyemi'), ('Bisi', 'Ade')]:
            Customer.objects.create(owner=user, first_name=first_name, last_name=last_name)

        response = authenticated_client.get(reverse('customers:customer-list'))

        assert [row['name'] for row in response.data['results']] == [
            'Bisi Ade', 'Emeka Adeyemi', 'Emeka Obi', 'Zainab Bello',
        ]

    def test_search_by_phone_and_email(self, authenticated_client, ada, chidi):
        response = authenticated_client.get(reverse('customers:customer-list'), {'search': '0803'})
        assert [row['name'] for row in response.data['results']] == ['Ada Obi']

        response = authenticated_client.get(reverse('customers:customer-list'), {'search': 'chidi@'})
        assert [row['name'] for row in response.data['results']] == ['Chidi Eze']

    def test_booking_count(self, authenticated_client, ada, booked):
        response = authenticated_client.get(reverse('customers:customer-detail', args=[ada.id]))

        assert response.data['booking_count'] == 1


@pytest.mark.django_db
class TestCustomerWrite:

    def test_create_title_cases_names(self, authenticated_client, user):
        response = authenticated_client.post(reverse('customers:customer-list'), {
            'first_name': 'ngozi',
            'last_name': "okonkwo-o'hara",
            'phone': '08099990000',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['first_name'] == 'Ngozi'
        assert response.data['name'] == "Ngozi Okonkwo-O'Hara"
        assert response.data['booking_count'] == 0

    def test_create_without_last_name(self, authenticated_client):
        response = authenticated_client.post(reverse('customers:customer-list'), {
            'first_name': 'tunde',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Tunde'

    def test_first_name_required(self, authenticated_client):
        response = authenticated_client.post(reverse('customers:customer-list'), {
            'first_name': '  ',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'first_name' in response.data

    def test_patch_last_name_rebuilds_display_name(self, authenticated_client, ada):
        response = authenticated_client.patch(
            reverse('customers:customer-detail', args=[ada.id]),
            {'last_name': 'nwosu'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        ada.refresh_from_db()
        assert ada.name == 'Ada Nwosu'

    def test_cannot_edit_other_users_customer(self, authenticated_client, stranger):
        response = authenticated_client.patch(
            reverse('customers:customer-detail', args=[stranger.id]),
            {'first_name': 'Hacked'},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCustomerDelete:

    def test_delete(self, authenticated_client, chidi):
        response = authenticated_client.delete(reverse('customers:customer-detail', args=[chidi.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Customer.objects.filter(id=chidi.id).exists()

    def test_delete_blocked_by_any_booking(self, authenticated_client, ada, booked):
        response = authenticated_client.delete(reverse('customers:customer-detail', args=[ada.id]))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.data['bookings']) == 1
        assert response.data['bookings'][0].startswith('Tent (ends ')
        assert Customer.objects.filter(id=ada.id).exists()

    def test_bulk_delete_skips_customers_with_bookings(self, authenticated_client, ada, chidi, booked, stranger):
        response = authenticated_client.delete(reverse('customers:customer-bulk-delete'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['skipped'] == 1
        assert set(Customer.objects.values_list('id', flat=True)) == {ada.id, stranger.id}


@pytest.mark.django_db
class TestCustomerExport:

    def test_free_plan_forbidden(self, authenticated_client, ada):
        response = authenticated_client.get(reverse('customers:customer-export'))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_csv(self, authenticated_client, user, ada, booked):
        Subscription.objects.create(user=user, plan=SubscriptionPlan.BUSINESS)

        response = authenticated_client.get(reverse('customers:customer-export'))

        assert response.status_code == status.HTTP_200_OK
        lines = response.content.decode().splitlines()
        assert lines[0] == 'First Name,Last Name,Phone,Email,Address,Bookings,Created'
        assert lines[1].startswith('Ada,Obi,08031234567,,,1,')

    def test_rows_ordered_by_name(self, authenticated_client, user):
        Subscription.objects.create(user=user, plan=SubscriptionPlan.PRO)
        for first_name in ['Zainab', 'Musa', 'Bisi']:
            Customer.objects.create(owner=user, first_name=first_name)

        response = authenticated_client.get(reverse('customers:customer-export'))

        lines = response.content.decode().splitlines()
        assert [line.split(',')[0] for line in lines[1:]] == ['Bisi', 'Musa', 'Zainab']
