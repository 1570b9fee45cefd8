from .exceptions import FacilityInactiveError, NotFoundError
from .intervals import parse_time_of_day, times_overlap, validate_range
from .models import ACTIVE_STATUSES, Facility, FacilityBooking


def booked_slots(facility_id, date, exclude_booking_id=None):
    """Active (start_time, end_time) pairs for a facility on one date, earliest first."""
    qs = FacilityBooking.objects.filter(
        facility_id=facility_id,
        date=date,
        status__in=ACTIVE_STATUSES,
    )
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    slots = list(qs.values_list('start_time', 'end_time'))
    return sorted(slots, key=lambda slot: parse_time_of_day(slot[0]))


def is_facility_slot_available(facility_id, date, start_time, end_time, exclude_booking_id=None):
    """
    True if no active booking of the facility overlaps [start_time, end_time) on date.

    Raises NotFoundError for an unknown facility and FacilityInactiveError
    when the facility is switched off. Like is_room_available, the caller
    owns the transaction.
    """
    validate_range(parse_time_of_day(start_time), parse_time_of_day(end_time))

    try:
        facility = Facility.objects.get(pk=facility_id)
    except Facility.DoesNotExist:
        raise NotFoundError(f"Facility {facility_id} not found")
    if not facility.is_active:
        raise FacilityInactiveError(f"Facility {facility.name} is not accepting bookings")

    for booked_start, booked_end in booked_slots(facility_id, date, exclude_booking_id):
        if times_overlap(start_time, end_time, booked_start, booked_end):
            return False
    return True
