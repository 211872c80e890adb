# staff/models.py
#
# Purpose:
# - Weekly working-hours template and date-specific exceptions per staff member.
#
# Design:
# - Times are minute-of-day integers (0..1439), e.g. 09:00 -> 540.
# - WorkingDay: one row per (staff, weekday); weekday follows date.weekday()
#   (0=Monday .. 6=Sunday).
# - WorkingHoursException: overrides the template for one calendar date
#   (holiday, closed day, shortened hours).
#
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator
from django.db import models

MINUTE_OF_DAY = [MaxValueValidator(24 * 60 - 1)]

WEEKDAY_CHOICES = [
    (0, "Monday"),
    (1, "Tuesday"),
    (2, "Wednesday"),
    (3, "Thursday"),
    (4, "Friday"),
    (5, "Saturday"),
    (6, "Sunday"),
]


def validate_hours(enabled, start_time, end_time, break_start, break_end):
    """
    Shared invariant check for a day's hours:
    - enabled  => start_time < end_time
    - a break  => start_time <= break_start < break_end <= end_time
    Raises ValidationError with a field->message mapping.
    """
    if not enabled:
        return
    if start_time is None or end_time is None:
        raise ValidationError({"start_time": "Working days need a start and end time."})
    if start_time >= end_time:
        raise ValidationError({"end_time": "End time must be after start time."})
    if (break_start is None) != (break_end is None):
        raise ValidationError({"break_end": "A break needs both a start and an end."})
    if break_start is not None:
        if not (start_time <= break_start < break_end <= end_time):
            raise ValidationError(
                {"break_start": "Break must fall inside working hours and end after it starts."}
            )


class WorkingDay(models.Model):
    """
    Weekly template entry for one weekday.
    Points to booking.Staff to avoid having two Staff models.
    """
    staff = models.ForeignKey(
        "booking.Staff",                 # ← reference booking app model
        on_delete=models.CASCADE,
        related_name="working_days",
    )
    weekday = models.PositiveSmallIntegerField(choices=WEEKDAY_CHOICES)
    enabled = models.BooleanField(default=False)
    start_time = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    end_time = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    break_start = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    break_end = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)

    class Meta:
        ordering = ["staff_id", "weekday"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "weekday"], name="uniq_workingday_staff_weekday"),
        ]

    def clean(self):
        validate_hours(self.enabled, self.start_time, self.end_time, self.break_start, self.break_end)

    def __str__(self):
        return f"{self.staff.name}: {self.get_weekday_display()}"


class WorkingHoursException(models.Model):
    """
    Date-specific override of the weekly template.
    closed=True makes the whole day unavailable; otherwise the hours given
    here replace the template's hours for that date.
    """
    staff = models.ForeignKey(
        "booking.Staff",
        on_delete=models.CASCADE,
        related_name="working_hours_exceptions",
    )
    date = models.DateField()
    closed = models.BooleanField(default=True)
    start_time = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    end_time = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    break_start = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    break_end = models.PositiveSmallIntegerField(null=True, blank=True, validators=MINUTE_OF_DAY)
    reason = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["staff_id", "date"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_exception_staff_date"),
        ]

    def clean(self):
        validate_hours(not self.closed, self.start_time, self.end_time, self.break_start, self.break_end)

    def __str__(self):
        label = "closed" if self.closed else "custom hours"
        return f"{self.staff.name}: {self.date} ({label})"
