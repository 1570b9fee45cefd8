from datetime import date
from io import StringIO
from unittest import mock

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import RequestFactory, TestCase
from django.urls import reverse

from reservations.admin import BookingAdmin
from reservations.models import Booking, BookingStatus, Facility, FacilityBooking, Resort, Room
from reservations.services import ReservationCoordinator

User = get_user_model()


class PopulateDbCommandTestCase(TestCase):

    def test_seeds_resort_rooms_and_facilities(self):
        out = StringIO()
        call_command('populate_db', stdout=out)

        self.assertEqual(Resort.objects.count(), 1)
        self.assertEqual(Room.objects.count(), 5)
        self.assertEqual(Facility.objects.filter(is_active=True).count(), 3)
        self.assertIn('Successfully populated', out.getvalue())

    def test_running_twice_does_not_duplicate(self):
        call_command('populate_db', stdout=StringIO())
        out = StringIO()
        call_command('populate_db', stdout=out)

        self.assertEqual(Room.objects.count(), 5)
        self.assertIn('Room 101 already exists', out.getvalue())


class BookingAdminActionsTestCase(TestCase):

    def setUp(self):
        resort = Resort.objects.create(name="Admin Resort")
        room = Room.objects.create(resort=resort, number="1", price_cents=5000, capacity=2)
        guest = User.objects.create_user(username="guest", password="pw")
        self.staff = User.objects.create_user(username="staff", password="pw", is_staff=True)
        coordinator = ReservationCoordinator()
        self.pending = coordinator.create_room_booking(guest.pk, room.pk, date(2024, 6, 1), date(2024, 6, 3), 1)
        self.cancelled = coordinator.create_room_booking(guest.pk, room.pk, date(2024, 6, 3), date(2024, 6, 4), 1)
        coordinator.cancel_room_booking(self.cancelled.pk, guest.pk)

        self.model_admin = BookingAdmin(Booking, admin.site)
        self.request = RequestFactory().post('/admin/')
        self.request.user = self.staff

    def test_confirm_action_goes_through_lifecycle(self):
        with mock.patch.object(self.model_admin, 'message_user') as message_user:
            self.model_admin.confirm_selected(self.request, Booking.objects.order_by('id'))

        self.pending.refresh_from_db()
        self.cancelled.refresh_from_db()
        self.assertEqual(self.pending.status, BookingStatus.CONFIRMED)
        self.assertEqual(self.cancelled.status, BookingStatus.CANCELLED)
        # one error for the cancelled booking, one summary
        self.assertEqual(message_user.call_count, 2)

    def test_bookings_cannot_be_deleted_from_admin(self):
        self.assertFalse(self.model_admin.has_delete_permission(self.request, self.pending))


class BookingAdminSiteTestCase(TestCase):
    """Admin pages show bookings but never write them outside the coordinator"""

    def setUp(self):
        resort = Resort.objects.create(name="Admin Resort")
        room = Room.objects.create(resort=resort, number="1", price_cents=5000, capacity=2)
        facility = Facility.objects.create(resort=resort, name="Spa")
        guest = User.objects.create_user(username="guest", password="pw")
        self.superuser = User.objects.create_superuser(username="root", password="pw", email="root@example.com")
        coordinator = ReservationCoordinator()
        self.first = coordinator.create_room_booking(guest.pk, room.pk, date(2024, 6, 1), date(2024, 6, 5), 1)
        self.second = coordinator.create_room_booking(guest.pk, room.pk, date(2024, 6, 10), date(2024, 6, 12), 1)
        self.slot = coordinator.create_facility_booking(guest.pk, facility.pk, date(2024, 7, 1), '09:00', '10:00')
        self.client.force_login(self.superuser)

    def test_change_form_cannot_move_booking_onto_another(self):
        url = reverse('admin:reservations_booking_change', args=[self.second.pk])
        response = self.client.post(url, {
            'check_in': '2024-06-02',
            'check_out': '2024-06-20',
            'status': BookingStatus.PENDING,
            '_save': 'Save',
        })

        self.assertEqual(response.status_code, 403)
        self.second.refresh_from_db()
        self.assertEqual(self.second.check_in, date(2024, 6, 10))
        self.assertEqual(self.second.check_out, date(2024, 6, 12))
        self.assertEqual(self.second.total_cents, 10000)

    def test_change_form_cannot_move_facility_slot(self):
        url = reverse('admin:reservations_facilitybooking_change', args=[self.slot.pk])
        response = self.client.post(url, {'start_time': '12:00', 'end_time': '13:00', '_save': 'Save'})

        self.assertEqual(response.status_code, 403)
        self.slot.refresh_from_db()
        self.assertEqual((self.slot.start_time, self.slot.end_time), ('09:00', '10:00'))

    def test_booking_detail_is_view_only(self):
        response = self.client.get(reverse('admin:reservations_booking_change', args=[self.first.pk]))
        self.assertEqual(response.status_code, 200)

    def test_add_form_is_disabled(self):
        response = self.client.get(reverse('admin:reservations_booking_add'))
        self.assertEqual(response.status_code, 403)
        response = self.client.get(reverse('admin:reservations_facilitybooking_add'))
        self.assertEqual(response.status_code, 403)

    def test_changelist_confirm_action_still_works(self):
        response = self.client.post(reverse('admin:reservations_booking_changelist'), {
            'action': 'confirm_selected',
            '_selected_action': [self.first.pk],
        })

        self.assertEqual(response.status_code, 302)
        self.first.refresh_from_db()
        self.assertEqual(self.first.status, BookingStatus.CONFIRMED)

    def test_changelist_cancel_action_on_facility_booking(self):
        response = self.client.post(reverse('admin:reservations_facilitybooking_changelist'), {
            'action': 'cancel_selected',
            '_selected_action': [self.slot.pk],
        })

        self.assertEqual(response.status_code, 302)
        self.assertEqual(FacilityBooking.objects.get(pk=self.slot.pk).status, BookingStatus.CANCELLED)
