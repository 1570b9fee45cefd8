from django.db.models import Exists, OuterRef

from .intervals import validate_range
from .models import ACTIVE_STATUSES, Booking, Room


def overlapping_bookings(room_id, check_in, check_out, exclude_booking_id=None):
    """Active bookings of a room that share at least one night with [check_in, check_out)."""
    validate_range(check_in, check_out)
    qs = Booking.objects.filter(
        room_id=room_id,
        status__in=ACTIVE_STATUSES,
        check_in__lt=check_out,
        check_out__gt=check_in,
    )
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs


def is_room_available(room_id, check_in, check_out, exclude_booking_id=None):
    """
    True if no active booking of the room overlaps the candidate stay.

    Read-only. Run it inside the same transaction as the insert that
    depends on the answer, after the room lock has been taken.
    """
    return not overlapping_bookings(
        room_id, check_in, check_out, exclude_booking_id=exclude_booking_id
    ).exists()


def available_rooms(check_in, check_out, max_price_cents=None, resort_id=None, min_capacity=None):
    validate_range(check_in, check_out)
    overlap = Exists(
        Booking.objects.filter(
            room=OuterRef('pk'),
            status__in=ACTIVE_STATUSES,
            check_in__lt=check_out,
            check_out__gt=check_in,
        )
    )
    qs = Room.objects.annotate(has_overlap=overlap).filter(has_overlap=False)
    if max_price_cents is not None:
        qs = qs.filter(price_cents__lte=max_price_cents)
    if resort_id is not None:
        qs = qs.filter(resort_id=resort_id)
    if min_capacity is not None:
        qs = qs.filter(capacity__gte=min_capacity)
    return qs.order_by('price_cents', 'number')
