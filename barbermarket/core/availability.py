# barbermarket/core/availability.py

from datetime import date as Date
from typing import List, NamedTuple, Optional, Sequence

from barbermarket.core.timeutils import time_to_minutes

BLOCKED_DATE_REASON = "Barber is not available on this date"
NO_WEEKLY_SCHEDULE_REASON = "Barber is not available on this day of the week"
NO_FITTING_SLOT_REASON = "No appointment fits in the barber's hours on this date"


class Window(NamedTuple):
    start: str
    end: str


class AvailabilityWindows(NamedTuple):
    windows: List[Window]
    reason: Optional[str] = None


def day_of_week(value: Date) -> int:
    # 0 = Sunday ... 6 = Saturday
    return value.isoweekday() % 7


def resolve_windows(recurring: Sequence, exception=None) -> AvailabilityWindows:
    """Open windows for one barber on one date.

    ``recurring`` holds the barber's weekly rows for the date's day of week
    and ``exception`` the date-specific override, if any. Both only need
    ``start_time`` / ``end_time`` (and ``is_available`` on the exception).

    An exception replaces the weekly schedule for that date entirely.
    """
    if exception is not None:
        if not exception.is_available:
            return AvailabilityWindows([], BLOCKED_DATE_REASON)
        return AvailabilityWindows([Window(exception.start_time, exception.end_time)])

    if not recurring:
        return AvailabilityWindows([], NO_WEEKLY_SCHEDULE_REASON)

    windows = [Window(row.start_time, row.end_time) for row in recurring]
    windows.sort(key=lambda w: time_to_minutes(w.start))
    return AvailabilityWindows(windows)


def windows_overlap(a: Window, b: Window) -> bool:
    return time_to_minutes(a.start) < time_to_minutes(b.end) and time_to_minutes(b.start) < time_to_minutes(a.end)
