"""
Status state machine shared by room bookings and facility bookings.

    PENDING --confirm--> CONFIRMED
    PENDING --cancel---> CANCELLED
    CONFIRMED --cancel-> CANCELLED

CANCELLED is terminal. The lifecycle only changes ``record.status``; saving
the record and re-checking availability are the coordinator's concern.
"""

from .exceptions import InvalidTransitionError
from .models import BookingStatus

CONFIRM = 'confirm'
CANCEL = 'cancel'

TRANSITIONS = {
    (BookingStatus.PENDING, CONFIRM): BookingStatus.CONFIRMED,
    (BookingStatus.PENDING, CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.CONFIRMED, CANCEL): BookingStatus.CANCELLED,
}


def can_transition(status, action):
    return (status, action) in TRANSITIONS


class BookingLifecycle:

    def __init__(self, record):
        self.record = record

    @property
    def status(self):
        return self.record.status

    @property
    def is_terminal(self):
        return self.record.status == BookingStatus.CANCELLED

    def confirm(self):
        return self._apply(CONFIRM)

    def cancel(self):
        return self._apply(CANCEL)

    def _apply(self, action):
        current = BookingStatus(self.record.status)
        target = TRANSITIONS.get((current, action))
        if target is None:
            raise InvalidTransitionError(
                f"Cannot {action} a booking that is {current.label.lower()}"
            )
        self.record.status = target
        return target
