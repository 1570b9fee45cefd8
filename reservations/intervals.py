"""Half-open interval checks for date ranges and time-of-day slots."""

import re

from .exceptions import InvalidRangeError, ValidationError

TIME_OF_DAY_RE = re.compile(r'([0-9]{2}):([0-9]{2})')


def parse_time_of_day(value):
    """Convert an ``HH:MM`` 24-hour string into minutes since midnight."""
    match = TIME_OF_DAY_RE.fullmatch(value or '')
    if not match:
        raise ValidationError(f"Time must be in HH:MM format, got {value!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Time {value!r} is not a valid time of day")
    return hours * 60 + minutes


def validate_range(start, end):
    if start >= end:
        raise InvalidRangeError(f"Range start {start} must be before end {end}")


def dates_overlap(a_start, a_end, b_start, b_end):
    """
    True when [a_start, a_end) and [b_start, b_end) share at least one day.

    A check-out on the same date as another check-in is not an overlap.
    """
    validate_range(a_start, a_end)
    validate_range(b_start, b_end)
    return a_start < b_end and b_start < a_end


def times_overlap(a_start, a_end, b_start, b_end):
    """Same as dates_overlap, for ``HH:MM`` strings on a single day."""
    a_start, a_end = parse_time_of_day(a_start), parse_time_of_day(a_end)
    b_start, b_end = parse_time_of_day(b_start), parse_time_of_day(b_end)
    validate_range(a_start, a_end)
    validate_range(b_start, b_end)
    return a_start < b_end and b_start < a_end
