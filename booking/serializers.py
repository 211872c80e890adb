from rest_framework import serializers

from .models import Booking, Service, Staff
from .services.booking_manager import BookingRequest
from .services.slot_utils import hhmm_to_minutes, minutes_to_hhmm


class MinuteOfDayField(serializers.Field):
    """Minute-of-day integer on the inside, 'HH:MM' (24h) on the wire."""
    default_error_messages = {
        "invalid": "Enter a time in HH:MM (24h) format.",
    }

    def to_representation(self, value):
        return minutes_to_hhmm(value)

    def to_internal_value(self, data):
        try:
            return hhmm_to_minutes(str(data))
        except (TypeError, ValueError):
            self.fail("invalid")


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = [
            "id", "name", "description", "duration_minutes",
            "price", "upfront_fee", "category", "active",
        ]

    def validate(self, attrs):
        price = attrs.get("price", getattr(self.instance, "price", None))
        upfront_fee = attrs.get("upfront_fee", getattr(self.instance, "upfront_fee", None))
        if price is not None and upfront_fee is not None and upfront_fee > price:
            raise serializers.ValidationError({"upfront_fee": "Upfront fee cannot exceed the service price."})
        return attrs


class StaffSerializer(serializers.ModelSerializer):
    specialties = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = Staff
        fields = ["id", "name", "email", "phone", "specialties", "active", "is_owner"]


class BookingSerializer(serializers.ModelSerializer):
    """Read-only representation used by list/retrieve and calendar consumers."""
    booking_time = MinuteOfDayField()
    service_name = serializers.CharField(source="service.name", read_only=True)
    staff_name = serializers.CharField(source="staff.name", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "client_name",
            "client_email",
            "client_phone",
            "service",
            "service_name",
            "staff",
            "staff_name",
            "booking_date",
            "booking_time",
            "duration_minutes",
            "total_amount",
            "upfront_fee",
            "status",
            "payment_status",
            "payment_reference",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """
    Public booking payload. Existence/activity of service and staff is
    checked by BookingManager so each failure gets its own error kind.
    """
    client_name = serializers.CharField(max_length=100)
    client_email = serializers.EmailField(max_length=100)
    client_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    service_id = serializers.IntegerField(min_value=1)
    staff_id = serializers.IntegerField(min_value=1)
    booking_date = serializers.DateField()
    booking_time = MinuteOfDayField()
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def to_request(self) -> BookingRequest:
        data = self.validated_data
        return BookingRequest(
            client_name=data["client_name"].strip(),
            client_email=data["client_email"].strip(),
            client_phone=(data.get("client_phone") or "").strip(),
            service_id=data["service_id"],
            staff_id=data["staff_id"],
            booking_date=data["booking_date"],
            booking_time=data["booking_time"],
            notes=data.get("notes") or "",
        )


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES)
    payment_status = serializers.ChoiceField(choices=Booking.PAYMENT_STATUS_CHOICES, required=False)


class PaymentConfirmationSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=255)


class AvailabilityQuerySerializer(serializers.Serializer):
    """
    staff_id + date, and either duration (minutes) or service_id
    (the service's duration is used).
    """
    staff_id = serializers.IntegerField(min_value=1)
    date = serializers.DateField()
    duration = serializers.IntegerField(min_value=1, max_value=24 * 60, required=False)
    service_id = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        if attrs.get("duration") is None:
            service_id = attrs.get("service_id")
            if service_id is None:
                raise serializers.ValidationError("Provide either 'duration' or 'service_id'.")
            service = Service.objects.filter(pk=service_id, active=True).first()
            if service is None:
                raise serializers.ValidationError({"service_id": "Unknown or inactive service."})
            attrs["duration"] = service.duration_minutes
        return attrs


class NextAvailableQuerySerializer(AvailabilityQuerySerializer):
    date = None


class BookingFilterSerializer(serializers.Serializer):
    staff_id = serializers.IntegerField(min_value=1, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES, required=False)

    def validate(self, attrs):
        date_from, date_to = attrs.get("date_from"), attrs.get("date_to")
        if date_from and date_to and date_from > date_to:
            raise serializers.ValidationError("date_from must be on or before date_to.")
        return attrs
