from datetime import date

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from reservations.models import Booking, BookingStatus, Facility, FacilityBooking, Resort, Room

User = get_user_model()


class BookingApiTestCase(APITestCase):

    def setUp(self):
        self.resort = Resort.objects.create(name="API Resort")
        self.room = Room.objects.create(resort=self.resort, number="201", price_cents=15000, capacity=2)
        self.guest = User.objects.create_user(username="guest", password="pw")
        self.other_guest = User.objects.create_user(username="other", password="pw")
        self.admin = User.objects.create_user(username="admin", password="pw", is_staff=True)
        self.client.force_authenticate(self.guest)

    def create_booking(self, check_in='2024-06-01', check_out='2024-06-05', num_guests=2):
        return self.client.post('/api/bookings/', {
            'room_id': self.room.id,
            'check_in': check_in,
            'check_out': check_out,
            'num_guests': num_guests,
        }, format='json')

    def test_create_booking(self):
        response = self.create_booking()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], BookingStatus.PENDING)
        self.assertEqual(response.data['total_cents'], 60000)
        self.assertEqual(response.data['total_dollar'], 600.0)
        self.assertEqual(response.data['room']['price_dollar'], 150.0)

    def test_overlap_returns_conflict(self):
        self.create_booking()
        self.client.force_authenticate(self.other_guest)

        response = self.create_booking(check_in='2024-06-03', check_out='2024-06-07')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'booking_conflict')
        self.assertIn('not available', response.data['error'])

    def test_invalid_input(self):
        response = self.create_booking(check_in='2024-06-05', check_out='2024-06-01')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.create_booking(num_guests=5)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'validation_error')

    def test_unknown_room(self):
        response = self.client.post('/api/bookings/', {
            'room_id': 9999, 'check_in': '2024-06-01', 'check_out': '2024-06-02', 'num_guests': 1,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.create_booking()
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_guest_lists_only_own_bookings(self):
        self.create_booking()
        self.client.force_authenticate(self.other_guest)
        self.create_booking(check_in='2024-07-01', check_out='2024-07-02')

        response = self.client.get('/api/bookings/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        self.client.force_authenticate(self.admin)
        response = self.client.get('/api/bookings/')
        self.assertEqual(len(response.data), 2)

    def test_cancel_twice(self):
        booking_id = self.create_booking().data['id']

        first = self.client.post(f'/api/bookings/{booking_id}/cancel/')
        second = self.client.post(f'/api/bookings/{booking_id}/cancel/')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data['status'], BookingStatus.CANCELLED)

    def test_confirm_requires_staff(self):
        booking_id = self.create_booking().data['id']

        response = self.client.post(f'/api/bookings/{booking_id}/confirm/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.post(f'/api/bookings/{booking_id}/confirm/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Booking.objects.get(pk=booking_id).status, BookingStatus.CONFIRMED)

        response = self.client.post(f'/api/bookings/{booking_id}/confirm/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'invalid_transition')

    def test_cancel_unknown_booking(self):
        response = self.client.post('/api/bookings/9999/cancel/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_room_search(self):
        Room.objects.create(resort=self.resort, number="202", price_cents=25000, capacity=4)
        self.create_booking()

        response = self.client.get('/api/rooms/', {'check_in': '2024-06-02', 'check_out': '2024-06-03'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([room['number'] for room in response.data], ['202'])

        response = self.client.get('/api/rooms/', {'check_in': '2024-06-05', 'check_out': '2024-06-06', 'max_price': 200})
        self.assertEqual([room['number'] for room in response.data], ['201'])

        response = self.client.get('/api/rooms/', {'check_in': 'june', 'check_out': '2024-06-06'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get('/api/rooms/', {'check_in': '2024-06-06', 'check_out': '2024-06-06'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class FacilityBookingApiTestCase(APITestCase):

    def setUp(self):
        resort = Resort.objects.create(name="API Resort")
        self.facility = Facility.objects.create(resort=resort, name="Tennis Court")
        self.guest = User.objects.create_user(username="guest", password="pw")
        self.client.force_authenticate(self.guest)

    def book(self, start_time, end_time, day='2024-07-01'):
        return self.client.post('/api/facility-bookings/', {
            'facility_id': self.facility.id,
            'date': day,
            'start_time': start_time,
            'end_time': end_time,
        }, format='json')

    def test_slot_conflict_and_adjacent_slot(self):
        self.assertEqual(self.book('09:00', '10:00').status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.book('09:30', '10:30').status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.book('10:00', '11:00').status_code, status.HTTP_201_CREATED)
        self.assertEqual(FacilityBooking.objects.count(), 2)

    def test_malformed_times(self):
        self.assertEqual(self.book('9:00', '10:00').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.book('11:00', '10:00').status_code, status.HTTP_400_BAD_REQUEST)
        # Arabic-Indic digits for 09:00
        self.assertEqual(self.book('٠٩:٠٠', '10:00').status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(FacilityBooking.objects.exists())

    def test_inactive_facility(self):
        self.facility.is_active = False
        self.facility.save()

        response = self.book('09:00', '10:00')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'facility_inactive')

    def test_schedule(self):
        self.book('14:00', '15:00')
        self.book('09:00', '10:00')

        response = self.client.get(f'/api/facilities/{self.facility.id}/schedule/', {'date': '2024-07-01'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['booked'], [
            {'start_time': '09:00', 'end_time': '10:00'},
            {'start_time': '14:00', 'end_time': '15:00'},
        ])

    def test_cancel(self):
        booking_id = self.book('09:00', '10:00').data['id']
        response = self.client.post(f'/api/facility-bookings/{booking_id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], BookingStatus.CANCELLED)


class HealthCheckTestCase(APITestCase):

    def test_health(self):
        response = self.client.get('/health')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json(), {'status': 'ok'})
