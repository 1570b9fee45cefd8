"""
Reservation coordinator.

Creates and cancels room and facility bookings so that two active bookings
never hold the same room for overlapping nights, or the same facility for
overlapping minutes on one date.

Each write runs as one transaction attempt:

1. lock the room (or facility) row by bumping its ``schedule_version``;
   concurrent writers for the same room queue up behind this UPDATE
   until the first one commits or rolls back
2. re-read the row and validate against it (capacity, is_active)
3. run the availability check
4. insert the booking as PENDING and commit

An overlap found in step 3 is a BookingConflictError and is never retried.
Only serialization failures reported by the database are retried, with
exponential backoff, up to ``RESERVATION_MAX_ATTEMPTS`` attempts.
"""

import datetime
import logging
import time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import OperationalError, transaction
from django.db.models import F
from django.utils.dateparse import parse_date

from .availability import is_room_available
from .exceptions import (
    BookingConflictError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from .intervals import parse_time_of_day, validate_range
from .lifecycle import CANCEL, CONFIRM, BookingLifecycle
from .models import Booking, BookingStatus, Facility, FacilityBooking, Room
from .pricing import compute_room_total
from .scheduling import is_facility_slot_available

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {'40001', '40P01'}


def is_serialization_failure(exc):
    """True for errors where the database gave up reconciling concurrent transactions."""
    cause = exc.__cause__
    sqlstate = getattr(cause, 'sqlstate', None) or getattr(cause, 'pgcode', None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    # sqlite reports writer contention as a locked database or table
    return 'locked' in str(exc).lower()


def default_authorizer(actor, booking, action):
    """Owners may cancel their own bookings; staff may cancel or confirm any."""
    if actor.is_staff:
        return True
    return action == CANCEL and booking.user_id == actor.pk


def coerce_date(value, field='date'):
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = parse_date(value or '')
    except (TypeError, ValueError):
        parsed = None
    if parsed is None:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}")
    return parsed


class ReservationCoordinator:

    def __init__(self, authorizer=None, max_attempts=None, retry_backoff=None):
        self.authorizer = authorizer or default_authorizer
        if max_attempts is None:
            max_attempts = getattr(settings, 'RESERVATION_MAX_ATTEMPTS', 3)
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        if retry_backoff is None:
            retry_backoff = getattr(settings, 'RESERVATION_RETRY_BACKOFF', 0.05)
        self.retry_backoff = retry_backoff

    # Room bookings

    def create_room_booking(self, user_id, room_id, check_in, check_out, num_guests, special_requests=''):
        check_in = coerce_date(check_in, 'check_in')
        check_out = coerce_date(check_out, 'check_out')
        validate_range(check_in, check_out)
        if num_guests < 1:
            raise ValidationError("num_guests must be at least 1")
        user = self._get_user(user_id)

        def attempt():
            room = self._lock_schedule(Room, room_id)
            if num_guests > room.capacity:
                raise ValidationError(f"Room capacity is {room.capacity}")

            if not is_room_available(room.pk, check_in, check_out):
                logger.info(
                    "Room %s already booked for %s - %s, rejecting request from user %s",
                    room.pk, check_in, check_out, user.pk,
                )
                raise BookingConflictError("Room is not available for the selected dates")

            return Booking.objects.create(
                user=user,
                room=room,
                check_in=check_in,
                check_out=check_out,
                num_guests=num_guests,
                total_cents=compute_room_total(room.price_cents, check_in, check_out),
                special_requests=special_requests or '',
                status=BookingStatus.PENDING,
            )

        booking = self._run_in_transaction(attempt, f"booking room {room_id}")
        logger.info(
            "Created booking %s for room %s (%s - %s, %s cents)",
            booking.pk, room_id, check_in, check_out, booking.total_cents,
        )
        return booking

    def cancel_room_booking(self, booking_id, actor_user_id):
        return self._change_status(Booking, booking_id, actor_user_id, CANCEL)

    def confirm_room_booking(self, booking_id, actor_user_id):
        return self._change_status(Booking, booking_id, actor_user_id, CONFIRM)

    # Facility bookings

    def create_facility_booking(self, user_id, facility_id, date, start_time, end_time, num_people=None):
        date = coerce_date(date)
        validate_range(parse_time_of_day(start_time), parse_time_of_day(end_time))
        if num_people is not None and num_people < 1:
            raise ValidationError("num_people must be at least 1")
        user = self._get_user(user_id)

        def attempt():
            self._lock_schedule(Facility, facility_id)
            if not is_facility_slot_available(facility_id, date, start_time, end_time):
                logger.info(
                    "Facility %s already booked on %s around %s-%s, rejecting request from user %s",
                    facility_id, date, start_time, end_time, user.pk,
                )
                raise BookingConflictError("Facility is not available for the selected time")

            return FacilityBooking.objects.create(
                user=user,
                facility_id=facility_id,
                date=date,
                start_time=start_time,
                end_time=end_time,
                num_people=num_people,
                status=BookingStatus.PENDING,
            )

        booking = self._run_in_transaction(attempt, f"booking facility {facility_id}")
        logger.info(
            "Created facility booking %s for facility %s (%s %s-%s)",
            booking.pk, facility_id, date, start_time, end_time,
        )
        return booking

    def cancel_facility_booking(self, booking_id, actor_user_id):
        return self._change_status(FacilityBooking, booking_id, actor_user_id, CANCEL)

    def confirm_facility_booking(self, booking_id, actor_user_id):
        return self._change_status(FacilityBooking, booking_id, actor_user_id, CONFIRM)

    # Internals

    def _get_user(self, user_id):
        User = get_user_model()
        try:
            return User.objects.get(pk=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f"User {user_id} not found")

    def _lock_schedule(self, model, pk):
        """Take the per-room (or per-facility) write lock and return the fresh row."""
        updated = model.objects.filter(pk=pk).update(schedule_version=F('schedule_version') + 1)
        if not updated:
            raise NotFoundError(f"{model.__name__} {pk} not found")
        return model.objects.get(pk=pk)

    def _change_status(self, model, booking_id, actor_user_id, action):
        actor = self._get_user(actor_user_id)

        def attempt():
            try:
                booking = model.objects.select_for_update().get(pk=booking_id)
            except model.DoesNotExist:
                raise NotFoundError(f"{model.__name__} {booking_id} not found")

            if not self.authorizer(actor, booking, action):
                raise NotAuthorizedError(f"User {actor.pk} may not {action} this booking")

            lifecycle = BookingLifecycle(booking)
            if action == CANCEL and lifecycle.is_terminal:
                # already cancelled, nothing to do
                return booking, False

            getattr(lifecycle, action)()
            booking.save(update_fields=['status', 'updated_at'])
            return booking, True

        booking, changed = self._run_in_transaction(attempt, f"{action} {model.__name__} {booking_id}")
        if changed:
            logger.info("%s %s is now %s (by user %s)", model.__name__, booking.pk, booking.status, actor.pk)
        return booking

    def _run_in_transaction(self, operation, description):
        for attempt in range(1, self.max_attempts + 1):
            try:
                with transaction.atomic():
                    return operation()
            except OperationalError as exc:
                if not is_serialization_failure(exc):
                    raise
                if attempt == self.max_attempts:
                    logger.warning(
                        "Giving up on %s after %s attempts: %s", description, attempt, exc,
                    )
                    raise BookingConflictError(
                        "The selected slot is busy with other requests, please try again"
                    ) from exc

                delay = self.retry_backoff * 2 ** (attempt - 1)
                logger.warning(
                    "Serialization failure on %s (attempt %s/%s), retrying in %.2fs: %s",
                    description, attempt, self.max_attempts, delay, exc,
                )
                time.sleep(delay)
