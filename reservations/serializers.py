from rest_framework import serializers

from .models import Booking, Facility, FacilityBooking, Room, time_of_day_validator


class RoomSerializer(serializers.ModelSerializer):

    class Meta:
        model = Room
        exclude = ['schedule_version']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['price_dollar'] = instance.price_cents / 100.0
        return data


class FacilitySerializer(serializers.ModelSerializer):

    class Meta:
        model = Facility
        exclude = ['schedule_version']


class BookingSerializer(serializers.ModelSerializer):
    room = RoomSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = '__all__'
        read_only_fields = ['user', 'total_cents', 'status', 'created_at', 'updated_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['total_dollar'] = instance.total_cents / 100.0
        return data


class BookingRequestSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()  # exclusive
    num_guests = serializers.IntegerField(min_value=1)
    special_requests = serializers.CharField(allow_blank=True, required=False, default='')

    def validate(self, data):
        if data['check_out'] <= data['check_in']:
            raise serializers.ValidationError("check_out must be after check_in")
        return data


class FacilityBookingSerializer(serializers.ModelSerializer):
    facility = FacilitySerializer(read_only=True)

    class Meta:
        model = FacilityBooking
        fields = '__all__'
        read_only_fields = ['user', 'status', 'created_at', 'updated_at']


class FacilityBookingRequestSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField()
    date = serializers.DateField()
    start_time = serializers.CharField(max_length=5, validators=[time_of_day_validator])
    end_time = serializers.CharField(max_length=5, validators=[time_of_day_validator])
    num_people = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate(self, data):
        # zero-padded HH:MM strings compare in clock order
        if data['end_time'] <= data['start_time']:
            raise serializers.ValidationError("end_time must be after start_time")
        return data
