from .exceptions import InvalidRangeError, ValidationError


def nights_between(check_in, check_out):
    return (check_out - check_in).days


def compute_room_total(price_cents, check_in, check_out):
    """Total charge in cents for a stay. Integer arithmetic only."""
    if price_cents < 0:
        raise ValidationError("Room price cannot be negative")

    nights = nights_between(check_in, check_out)
    if nights <= 0:
        raise InvalidRangeError("check_out must be after check_in")
    return price_cents * nights
