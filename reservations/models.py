from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator, RegexValidator

time_of_day_validator = RegexValidator(r'^([01][0-9]|2[0-3]):[0-5][0-9]\Z', 'Use HH:MM (24-hour) format')


class BookingStatus(models.TextChoices):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


# Statuses that still hold their slot
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Resort(models.Model):
    name = models.CharField(max_length=150)
    location = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)

    def __str__(self):
        return self.name


class Room(models.Model):
    resort = models.ForeignKey(Resort, on_delete=models.PROTECT, related_name="rooms")
    number = models.CharField(max_length=20)
    room_type = models.CharField(max_length=50, blank=True)
    price_cents = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    capacity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    description = models.TextField(blank=True)
    # bumped inside every reservation write; the UPDATE doubles as the room lock
    schedule_version = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["resort", "number"], name="unique_room_number_per_resort"),
        ]

    def __str__(self):
        return f"Room {self.number}"


class Facility(models.Model):
    resort = models.ForeignKey(Resort, on_delete=models.PROTECT, related_name="facilities")
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    schedule_version = models.PositiveIntegerField(default=0, editable=False)

    class Meta:
        verbose_name_plural = "facilities"

    def __str__(self):
        return self.name


class Booking(models.Model):
    Status = BookingStatus
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="bookings")
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="bookings")
    check_in = models.DateField()
    check_out = models.DateField()  # exclusive
    num_guests = models.PositiveIntegerField(default=1)
    total_cents = models.PositiveIntegerField()
    special_requests = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["room", "status", "check_in"], name="booking_room_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_check_out_after_check_in",
            ),
        ]

    def __str__(self):
        return f"Booking {self.pk} ({self.room_id}: {self.check_in} - {self.check_out})"


class FacilityBooking(models.Model):
    Status = BookingStatus
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="facility_bookings")
    facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name="bookings")
    date = models.DateField()
    start_time = models.CharField(max_length=5, validators=[time_of_day_validator])
    end_time = models.CharField(max_length=5, validators=[time_of_day_validator])  # exclusive
    num_people = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["facility", "date", "status"], name="facility_booking_slot_idx"),
        ]
        constraints = [
            # zero-padded HH:MM strings compare in clock order
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="facility_booking_end_after_start",
            ),
        ]

    def __str__(self):
        return f"FacilityBooking {self.pk} ({self.facility_id}: {self.date} {self.start_time}-{self.end_time})"
