from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from booking.serializers import MinuteOfDayField

from .models import WorkingDay, WorkingHoursException, validate_hours

HOUR_FIELDS = ("start_time", "end_time", "break_start", "break_end")


class _HoursMixin:
    """Runs the shared working-hours invariant against the merged instance state."""
    enabled_field = "enabled"

    def _merged(self, attrs, name, default=None):
        if name in attrs:
            return attrs[name]
        return getattr(self.instance, name, default)

    def validate(self, attrs):
        if self.enabled_field == "closed":
            enabled = not self._merged(attrs, "closed", True)
        else:
            enabled = self._merged(attrs, "enabled", False)
        try:
            validate_hours(enabled, *(self._merged(attrs, f) for f in HOUR_FIELDS))
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict)
        return attrs


class WorkingDaySerializer(_HoursMixin, serializers.ModelSerializer):
    start_time = MinuteOfDayField(required=False, allow_null=True)
    end_time = MinuteOfDayField(required=False, allow_null=True)
    break_start = MinuteOfDayField(required=False, allow_null=True)
    break_end = MinuteOfDayField(required=False, allow_null=True)

    class Meta:
        model = WorkingDay
        fields = ["id", "staff", "weekday", "enabled", *HOUR_FIELDS]


class WorkingHoursExceptionSerializer(_HoursMixin, serializers.ModelSerializer):
    enabled_field = "closed"
    start_time = MinuteOfDayField(required=False, allow_null=True)
    end_time = MinuteOfDayField(required=False, allow_null=True)
    break_start = MinuteOfDayField(required=False, allow_null=True)
    break_end = MinuteOfDayField(required=False, allow_null=True)

    class Meta:
        model = WorkingHoursException
        fields = ["id", "staff", "date", "closed", *HOUR_FIELDS, "reason"]
