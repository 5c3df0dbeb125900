"""
HTTP surface: auth, status codes, error mapping and the booking flow end to end

Runs the real app (routes, DI, use cases, repositories) on SQLite with the
dashboard cache and notifiers mocked.
"""

from fastapi import status
import pytest

from src.service.dining.domain.enum.staff_role import StaffRole
from test.constants import OTHER_RESTAURANT_ID, RESTAURANT_ID


pytestmark = pytest.mark.integration

SATURDAY = '2025-06-14'


@pytest.fixture
def floor(client, admin) -> dict[str, int]:
    ids = {}
    for number, capacity in (('T1', 4), ('T2', 2), ('T10', 6)):
        response = client.post(
            '/api/tables', json={'table_number': number, 'capacity': capacity}, headers=admin
        )
        assert response.status_code == status.HTTP_201_CREATED
        ids[number] = response.json()['id']
    return ids


@pytest.fixture
def dinner_slot_id(client, admin) -> int:
    response = client.post(
        '/api/slots', json={'start_time': '19:00', 'end_time': '20:30', 'days': [6]}, headers=admin
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()[0]['id']


def _booking(table_id: int, slot_id: int, **overrides) -> dict:
    body = {
        'table_id': table_id,
        'slot_id': slot_id,
        'date': SATURDAY,
        'customer_name': 'Asha Patel',
        'contact': '9876543210',
        'adults': 4,
        'kids': 2,
        'food_pref': 'Jain',
    }
    body.update(overrides)
    return body


class TestCommonEndpoints:
    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'healthy'

    def test_metrics(self, client):
        response = client.get('/metrics')

        assert response.status_code == status.HTTP_200_OK
        assert 'reservation_operations_total' in response.text


class TestAuth:
    def test_missing_token(self, client):
        response = client.get('/api/slots', params={'all': True})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {'detail': 'Not authenticated'}

    def test_garbage_token(self, client):
        response = client.get(
            '/api/slots', params={'all': True}, headers={'Authorization': 'Bearer nope'}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {'detail': 'Invalid token'}

    def test_cookie_token(self, client, settings, auth_headers):
        token = auth_headers()['Authorization'].removeprefix('Bearer ')
        client.cookies.set(settings.ACCESS_TOKEN_COOKIE_NAME, token)

        response = client.get('/api/tables')

        assert response.status_code == status.HTTP_200_OK

    def test_staff_can_read_but_not_write(self, client, auth_headers):
        staff = auth_headers(role=StaffRole.STAFF)

        assert client.get('/api/tables', headers=staff).status_code == status.HTTP_200_OK
        response = client.post(
            '/api/tables', json={'table_number': 'T1', 'capacity': 4}, headers=staff
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {'detail': 'Only admins can perform this action'}

    def test_public_slots_need_no_token(self, client, dinner_slot_id, floor):
        response = client.get(
            '/api/slots/public', params={'restaurant_id': RESTAURANT_ID, 'date': SATURDAY}
        )

        assert response.status_code == status.HTTP_200_OK
        assert [s['id'] for s in response.json()] == [dinner_slot_id]
        assert response.json()[0]['time'] == '7:00 PM - 8:30 PM'


class TestValidation:
    def test_missing_field_is_400(self, client, admin, floor, dinner_slot_id):
        body = _booking(floor['T1'], dinner_slot_id)
        del body['customer_name']

        response = client.post('/api/reservations', json=body, headers=admin)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['detail'][0]['loc'] == ['body', 'customer_name']

    def test_domain_rule_is_400(self, client, admin, floor, dinner_slot_id):
        response = client.post(
            '/api/reservations', json=_booking(floor['T1'], dinner_slot_id, adults=0), headers=admin
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {'detail': 'adults must be at least 1'}

    def test_slot_days_and_date_together(self, client, admin):
        response = client.post(
            '/api/slots',
            json={'start_time': '19:00', 'end_time': '20:30', 'days': [6], 'date': SATURDAY},
            headers=admin,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestBookingFlow:
    def test_book_conflict_read_cancel(self, client, admin, floor, dinner_slot_id, guest_notifier):
        # When: T1+T2 booked
        response = client.post(
            '/api/reservations',
            json=_booking(floor['T1'], dinner_slot_id, merge_table_ids=[floor['T2']]),
            headers=admin,
        )

        # Then
        assert response.status_code == status.HTTP_201_CREATED
        booking = response.json()
        assert booking['table_numbers'] == ['T1', 'T2']
        assert booking['party_size'] == 6
        assert booking['exceeds_capacity'] is False
        assert len(booking['reservations']) == 2
        assert booking['group_id'] is not None

        # When: Same table again
        response = client.post(
            '/api/reservations', json=_booking(floor['T2'], dinner_slot_id), headers=admin
        )

        # Then
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {'detail': 'Table T2 is already booked for this slot'}

        # When: Read through the second row
        second_id = booking['reservations'][1]['id']
        response = client.get(f'/api/reservations/{second_id}', headers=admin)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()['id'] == booking['id']

        # And: The grid shows both tables held
        grid = client.get(
            '/api/reservations/availability',
            params={'date': SATURDAY, 'slot_id': dinner_slot_id},
            headers=admin,
        ).json()
        assert [(t['table_number'], t['is_occupied']) for t in grid['tables']] == [
            ('T1', True),
            ('T2', True),
            ('T10', False),
        ]

        # And: The dashboard counts one booking of six
        summary = client.get(
            '/api/dashboard/summary', params={'date': SATURDAY}, headers=admin
        ).json()
        assert (summary['bookings_count'], summary['guests_count']) == (1, 6)
        assert summary['reservations'][0]['table_number'] == 'T1+T2'

        # When: Cancelled
        response = client.post(
            f'/api/reservations/{second_id}/cancel', json={'reason': 'no show'}, headers=admin
        )

        # Then
        assert response.status_code == status.HTTP_200_OK
        assert {r['status'] for r in response.json()['reservations']} == {'CANCELLED'}

    def test_move_to_another_table(self, client, admin, floor, dinner_slot_id):
        booking = client.post(
            '/api/reservations', json=_booking(floor['T1'], dinner_slot_id), headers=admin
        ).json()

        response = client.post(
            f'/api/reservations/{booking["id"]}/move',
            json={'table_ids': [floor['T10']]},
            headers=admin,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['table_numbers'] == ['T10']
        assert response.json()['id'] == booking['id']

    def test_update_party(self, client, admin, floor, dinner_slot_id):
        booking = client.post(
            '/api/reservations', json=_booking(floor['T1'], dinner_slot_id), headers=admin
        ).json()

        response = client.patch(
            f'/api/reservations/{booking["id"]}',
            json={'customer_name': 'Asha P.', 'contact': '9876543210', 'adults': 2},
            headers=admin,
        )

        assert response.status_code == status.HTTP_200_OK
        row = response.json()['reservations'][0]
        assert (row['customer_name'], row['adults'], row['kids']) == ('Asha P.', 2, 0)

    def test_other_restaurant_gets_404(self, client, admin, auth_headers, floor, dinner_slot_id):
        booking = client.post(
            '/api/reservations', json=_booking(floor['T1'], dinner_slot_id), headers=admin
        ).json()
        stranger = auth_headers(restaurant_id=OTHER_RESTAURANT_ID)

        response = client.get(f'/api/reservations/{booking["id"]}', headers=stranger)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'detail': 'Reservation not found'}


class TestCatalogEndpoints:
    def test_override_hides_slot_from_guests(self, client, admin, floor, dinner_slot_id):
        response = client.post(
            '/api/slot-availability',
            json={'slot_id': dinner_slot_id, 'date': SATURDAY, 'is_slot_disabled': True},
            headers=admin,
        )
        assert response.status_code == status.HTTP_200_OK

        overrides = client.get(
            '/api/slot-availability', params={'date': SATURDAY}, headers=admin
        ).json()
        assert [o['slot_id'] for o in overrides] == [dinner_slot_id]
        public = client.get(
            '/api/slots/public', params={'restaurant_id': RESTAURANT_ID, 'date': SATURDAY}
        ).json()
        assert public == []

    def test_delete_slot(self, client, admin, dinner_slot_id):
        response = client.delete(f'/api/slots/{dinner_slot_id}', headers=admin)
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = client.delete(f'/api/slots/{dinner_slot_id}', headers=admin)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_table_rename_clash(self, client, admin, floor):
        response = client.patch(
            f'/api/tables/{floor["T2"]}', json={'table_number': 'T1'}, headers=admin
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {'detail': 'Table T1 already exists'}
