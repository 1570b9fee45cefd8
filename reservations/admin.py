from django.contrib import admin, messages

from .exceptions import ReservationError
from .models import Booking, Facility, FacilityBooking, Resort, Room
from .services import ReservationCoordinator


@admin.register(Resort)
class ResortAdmin(admin.ModelAdmin):
    list_display = ('name', 'location')


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ('number', 'resort', 'room_type', 'price_cents', 'capacity')
    list_filter = ('resort', 'room_type')


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ('name', 'resort', 'is_active')
    list_filter = ('resort', 'is_active')


class ReservationAdmin(admin.ModelAdmin):
    """
    Read-only view of bookings.

    Rows are only written by the coordinator; staff change status through
    the confirm/cancel actions so the lifecycle and overlap rules apply.
    """
    actions = ['confirm_selected', 'cancel_selected']

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def _apply(self, request, queryset, method_name):
        coordinator = ReservationCoordinator()
        changed = 0
        for booking in queryset:
            try:
                getattr(coordinator, method_name)(booking.pk, request.user.pk)
                changed += 1
            except ReservationError as exc:
                self.message_user(request, f"{booking}: {exc.message}", messages.ERROR)
        if changed:
            self.message_user(request, f"Updated {changed} booking(s)", messages.SUCCESS)


@admin.register(Booking)
class BookingAdmin(ReservationAdmin):
    list_display = ('id', 'room', 'user', 'check_in', 'check_out', 'status', 'total_cents')
    list_filter = ('status', 'room__resort')

    @admin.action(description="Confirm selected bookings")
    def confirm_selected(self, request, queryset):
        self._apply(request, queryset, 'confirm_room_booking')

    @admin.action(description="Cancel selected bookings")
    def cancel_selected(self, request, queryset):
        self._apply(request, queryset, 'cancel_room_booking')


@admin.register(FacilityBooking)
class FacilityBookingAdmin(ReservationAdmin):
    list_display = ('id', 'facility', 'user', 'date', 'start_time', 'end_time', 'status')
    list_filter = ('status', 'facility')

    @admin.action(description="Confirm selected facility bookings")
    def confirm_selected(self, request, queryset):
        self._apply(request, queryset, 'confirm_facility_booking')

    @admin.action(description="Cancel selected facility bookings")
    def cancel_selected(self, request, queryset):
        self._apply(request, queryset, 'cancel_facility_booking')
