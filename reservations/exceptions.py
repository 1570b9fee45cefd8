"""
Typed errors raised by the reservation engine.

Every failure the coordinator can report has its own class so callers can
tell "dates taken" apart from "bad input" or "not yours to cancel".
"""


class ReservationError(Exception):
    """Base class for all reservation engine errors"""

    code = 'reservation_error'
    default_message = 'Reservation failed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ReservationError):
    code = 'validation_error'
    default_message = 'Invalid reservation request.'


class InvalidRangeError(ValidationError):
    code = 'invalid_range'
    default_message = 'Range start must be before range end.'


class FacilityInactiveError(ValidationError):
    code = 'facility_inactive'
    default_message = 'Facility is not accepting bookings.'


class BookingConflictError(ReservationError):
    code = 'booking_conflict'
    default_message = 'The selected slot is no longer available, please pick another.'


class InvalidTransitionError(ReservationError):
    code = 'invalid_transition'
    default_message = 'This status change is not allowed.'


class NotFoundError(ReservationError):
    code = 'not_found'
    default_message = 'Not found.'


class NotAuthorizedError(ReservationError):
    code = 'not_authorized'
    default_message = 'You are not allowed to change this booking.'
