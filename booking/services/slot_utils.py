"""
slot_utils.py
-------------
Minute-of-day helpers used by the availability engine and the API layer:
- HH:MM <-> minute-of-day conversion
- interval subtraction over [start, end) minute intervals
- quantizing open windows into slot start times
"""

from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60


def _parse_hhmm(value: str) -> time:
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time {value!r}; expected HH:MM.")
    h, m = parts[0], parts[1]
    s = parts[2] if len(parts) == 3 else "0"
    return time(int(h), int(m), int(s))


def hhmm_to_minutes(value: str) -> int:
    """'09:30' (or '09:30:00') -> 570."""
    t = _parse_hhmm(value)
    return t.hour * 60 + t.minute


def minutes_to_hhmm(minute: int) -> str:
    """570 -> '09:30'."""
    if not 0 <= minute < MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minute}")
    return f"{minute // 60:02d}:{minute % 60:02d}"


def minute_of_day(dt: datetime) -> int:
    return dt.hour * 60 + dt.minute


def subtract_intervals(windows, busy):
    """
    Remove every busy [start, end) interval from the open windows.

    Both inputs are iterables of (start, end) tuples. Busy intervals are sorted
    once and swept against each window, so a busy interval may split a window
    in two, trim either edge, or remove it entirely.
    Returns the remaining non-empty windows in ascending order.
    """
    busy_sorted = sorted((s, e) for s, e in busy if s < e)
    result = []
    for w_start, w_end in sorted(windows):
        cursor = w_start
        for b_start, b_end in busy_sorted:
            if b_end <= cursor:
                continue
            if b_start >= w_end:
                break
            if b_start > cursor:
                result.append((cursor, b_start))
            cursor = max(cursor, b_end)
            if cursor >= w_end:
                break
        if cursor < w_end:
            result.append((cursor, w_end))
    return result


def generate_slot_starts(windows, duration_minutes: int, step_minutes: int):
    """
    Candidate starts beginning at each window's start, stepping by
    step_minutes, while start + duration fits inside the window.
    """
    if duration_minutes <= 0 or step_minutes <= 0:
        raise ValueError("duration and step must be positive")
    slots = []
    for w_start, w_end in windows:
        current = w_start
        while current + duration_minutes <= w_end:
            slots.append(current)
            current += step_minutes
    return sorted(slots)
