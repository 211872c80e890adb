"""
working_hours.py
----------------
WorkingHoursStore: lookup of a staff member's weekly template and
date-specific exceptions.

Pure storage/lookup. The only "logic" here is resolving which hours apply
to a given date (exception first, weekly template otherwise), which the
availability engine consumes as a DaySchedule.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from booking.exceptions import NotFound
from booking.models import Staff

from .models import WorkingDay, WorkingHoursException

# Default schedule for new staff (salon trading hours):
# Mon/Sun off, Tue-Thu 09:00-18:00, Fri-Sat 09:00-15:00.
DEFAULT_WEEKLY_HOURS = {
    0: None,
    1: (9 * 60, 18 * 60),
    2: (9 * 60, 18 * 60),
    3: (9 * 60, 18 * 60),
    4: (9 * 60, 15 * 60),
    5: (9 * 60, 15 * 60),
    6: None,
}


@dataclass(frozen=True)
class DaySchedule:
    enabled: bool
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    break_start: Optional[int] = None
    break_end: Optional[int] = None

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(enabled=False)

    @property
    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None

    def windows(self) -> List[Tuple[int, int]]:
        """
        Working window minus the break: zero, one or two [start, end) intervals.
        """
        if not self.enabled:
            return []
        if not self.has_break:
            return [(self.start_time, self.end_time)]
        parts = [(self.start_time, self.break_start), (self.break_end, self.end_time)]
        return [(s, e) for s, e in parts if s < e]


WeeklyAvailability = Dict[int, DaySchedule]


def _schedule_from_row(row, enabled: bool) -> DaySchedule:
    if not enabled:
        return DaySchedule.closed()
    return DaySchedule(
        enabled=True,
        start_time=row.start_time,
        end_time=row.end_time,
        break_start=row.break_start,
        break_end=row.break_end,
    )


class WorkingHoursStore:
    def _require_staff(self, staff_id) -> None:
        if not Staff.objects.filter(pk=staff_id).exists():
            raise NotFound(f"Staff member {staff_id} was not found.")

    def get_weekly_template(self, staff_id) -> WeeklyAvailability:
        """
        Weekday (0=Mon..6=Sun) -> DaySchedule.
        Weekdays without a row are treated as disabled.
        Raises NotFound if the staff member does not exist.
        """
        self._require_staff(staff_id)
        template = {weekday: DaySchedule.closed() for weekday in range(7)}
        for row in WorkingDay.objects.filter(staff_id=staff_id):
            template[row.weekday] = _schedule_from_row(row, row.enabled)
        return template

    def get_exception_for_date(self, staff_id, day) -> Optional[DaySchedule]:
        """Override for one date, or None to use the weekly template."""
        row = WorkingHoursException.objects.filter(staff_id=staff_id, date=day).first()
        if row is None:
            return None
        return _schedule_from_row(row, not row.closed)

    def resolve_day(self, staff_id, day) -> DaySchedule:
        template = self.get_weekly_template(staff_id)
        override = self.get_exception_for_date(staff_id, day)
        if override is not None:
            return override
        return template[day.weekday()]

    def set_working_day(self, staff_id, weekday, enabled, start_time=None, end_time=None,
                        break_start=None, break_end=None) -> WorkingDay:
        """Create or replace one weekday of the template (validated)."""
        self._require_staff(staff_id)
        row = WorkingDay.objects.filter(staff_id=staff_id, weekday=weekday).first()
        if row is None:
            row = WorkingDay(staff_id=staff_id, weekday=weekday)
        row.enabled = enabled
        row.start_time = start_time
        row.end_time = end_time
        row.break_start = break_start
        row.break_end = break_end
        row.full_clean()
        row.save()
        return row

    def create_default_schedule(self, staff_id) -> None:
        """Seed the weekly template with the salon's trading hours (idempotent)."""
        for weekday, hours in DEFAULT_WEEKLY_HOURS.items():
            if WorkingDay.objects.filter(staff_id=staff_id, weekday=weekday).exists():
                continue
            if hours is None:
                WorkingDay.objects.create(staff_id=staff_id, weekday=weekday, enabled=False)
            else:
                WorkingDay.objects.create(
                    staff_id=staff_id,
                    weekday=weekday,
                    enabled=True,
                    start_time=hours[0],
                    end_time=hours[1],
                )
