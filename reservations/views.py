from datetime import datetime

from django.http import JsonResponse
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from . import exceptions
from .availability import available_rooms
from .models import Booking, Facility, FacilityBooking, Room
from .scheduling import booked_slots
from .serializers import (
    BookingRequestSerializer,
    BookingSerializer,
    FacilityBookingRequestSerializer,
    FacilityBookingSerializer,
    FacilitySerializer,
    RoomSerializer,
)
from .services import ReservationCoordinator

ERROR_STATUS = {
    exceptions.ValidationError: status.HTTP_400_BAD_REQUEST,
    exceptions.NotAuthorizedError: status.HTTP_403_FORBIDDEN,
    exceptions.NotFoundError: status.HTTP_404_NOT_FOUND,
    exceptions.BookingConflictError: status.HTTP_409_CONFLICT,
    exceptions.InvalidTransitionError: status.HTTP_409_CONFLICT,
}


def error_response(exc):
    for error_class, http_status in ERROR_STATUS.items():
        if isinstance(exc, error_class):
            break
    else:
        http_status = status.HTTP_400_BAD_REQUEST
    return Response({'error': exc.message, 'code': exc.code}, status=http_status)


def parse_query_date(value):
    return datetime.strptime(value, '%Y-%m-%d').date()


def health_check(request):
    return JsonResponse({"status": "ok"})


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Room.objects.all().order_by('id')
    serializer_class = RoomSerializer

    def list(self, request):
        """Search available rooms with filters"""
        check_in_str = request.query_params.get('check_in')
        check_out_str = request.query_params.get('check_out')
        max_price = request.query_params.get('max_price')
        resort_id = request.query_params.get('resort')
        guests = request.query_params.get('guests')

        if check_in_str and check_out_str:
            try:
                check_in = parse_query_date(check_in_str)
                check_out = parse_query_date(check_out_str)
                rooms = available_rooms(
                    check_in, check_out,
                    max_price_cents=int(max_price) * 100 if max_price else None,
                    resort_id=int(resort_id) if resort_id else None,
                    min_capacity=int(guests) if guests else None,
                )
            except ValueError:
                return Response({'error': 'Invalid filter. Use YYYY-MM-DD dates and whole numbers'},
                                status=status.HTTP_400_BAD_REQUEST)
            except exceptions.ReservationError as exc:
                return error_response(exc)
        else:
            # Return all rooms if no dates specified
            rooms = self.get_queryset()

        serializer = self.get_serializer(rooms, many=True)
        return Response(serializer.data)


class FacilityViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Facility.objects.all().order_by('id')
    serializer_class = FacilitySerializer

    @action(detail=True, methods=['get'])
    def schedule(self, request, pk=None):
        """Booked slots of a facility for one day"""
        facility = self.get_object()
        date_str = request.query_params.get('date')
        if not date_str:
            return Response({'error': 'date parameter is required'},
                            status=status.HTTP_400_BAD_REQUEST)
        try:
            day = parse_query_date(date_str)
        except ValueError:
            return Response({'error': 'Invalid date format. Use YYYY-MM-DD'},
                            status=status.HTTP_400_BAD_REQUEST)

        slots = [{'start_time': start, 'end_time': end} for start, end in booked_slots(facility.pk, day)]
        return Response({'facility_id': facility.pk, 'date': date_str,
                         'is_active': facility.is_active, 'booked': slots})


class ReservationViewSetMixin:
    """
    List/retrieve plus create, cancel and confirm routed through the coordinator.

    Guests only see their own bookings; staff see all of them.
    """
    permission_classes = [permissions.IsAuthenticated]
    request_serializer_class = None
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        qs = super().get_queryset()
        if self.request.user.is_staff:
            return qs
        return qs.filter(user=self.request.user)

    def get_coordinator(self):
        return ReservationCoordinator()

    def create(self, request, *args, **kwargs):
        serializer = self.request_serializer_class(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            booking = self.perform_reservation(request.user, serializer.validated_data)
        except exceptions.ReservationError as exc:
            return error_response(exc)
        return Response(self.get_serializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        return self._change_status('cancel', pk)

    @action(detail=True, methods=['post'])
    def confirm(self, request, pk=None):
        return self._change_status('confirm', pk)

    def _change_status(self, action_name, pk):
        try:
            booking = self.perform_status_change(action_name, int(pk), self.request.user.pk)
        except exceptions.ReservationError as exc:
            return error_response(exc)
        return Response(self.get_serializer(booking).data)


class BookingViewSet(ReservationViewSetMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Booking.objects.select_related('room')
    serializer_class = BookingSerializer
    request_serializer_class = BookingRequestSerializer

    def perform_reservation(self, user, data):
        return self.get_coordinator().create_room_booking(
            user_id=user.pk,
            room_id=data['room_id'],
            check_in=data['check_in'],
            check_out=data['check_out'],
            num_guests=data['num_guests'],
            special_requests=data.get('special_requests', ''),
        )

    def perform_status_change(self, action_name, booking_id, actor_user_id):
        coordinator = self.get_coordinator()
        if action_name == 'cancel':
            return coordinator.cancel_room_booking(booking_id, actor_user_id)
        return coordinator.confirm_room_booking(booking_id, actor_user_id)


class FacilityBookingViewSet(ReservationViewSetMixin, viewsets.ReadOnlyModelViewSet):
    queryset = FacilityBooking.objects.select_related('facility')
    serializer_class = FacilityBookingSerializer
    request_serializer_class = FacilityBookingRequestSerializer

    def perform_reservation(self, user, data):
        return self.get_coordinator().create_facility_booking(
            user_id=user.pk,
            facility_id=data['facility_id'],
            date=data['date'],
            start_time=data['start_time'],
            end_time=data['end_time'],
            num_people=data.get('num_people'),
        )

    def perform_status_change(self, action_name, booking_id, actor_user_id):
        coordinator = self.get_coordinator()
        if action_name == 'cancel':
            return coordinator.cancel_facility_booking(booking_id, actor_user_id)
        return coordinator.confirm_facility_booking(booking_id, actor_user_id)
