# barbermarket/core/timeutils.py
"""Clock-time helpers.

All times are zero-padded 24-hour ``HH:MM`` strings. Format checking happens
at the request schemas; these functions assume well-formed input.
"""

from collections.abc import Sequence

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value: str) -> int:
    """'09:30' -> 570"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """570 -> '09:30'. No day rollover: 0 <= minutes < 1440."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def calculate_end_time(start: str, duration_minutes: int) -> str:
    return minutes_to_time(time_to_minutes(start) + duration_minutes)


class TimeSlots(Sequence):
    """Slot start times from ``start`` stepping by ``duration`` minutes.

    Only slots that end on or before ``end`` are included. Backed by a
    ``range`` so it is lazy and can be iterated any number of times.
    """

    def __init__(self, start: str, end: str, duration_minutes: int):
        if duration_minutes <= 0:
            raise ValueError("duration_minutes must be positive")
        start_min = time_to_minutes(start)
        end_min = time_to_minutes(end)
        self.duration_minutes = duration_minutes
        # last valid start is end - duration
        self._starts = range(start_min, end_min - duration_minutes + 1, duration_minutes)

    def __len__(self):
        return len(self._starts)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [minutes_to_time(m) for m in self._starts[index]]
        return minutes_to_time(self._starts[index])

    def __repr__(self):
        return f"TimeSlots({list(self)!r})"


def generate_time_slots(start: str, end: str, duration_minutes: int) -> TimeSlots:
    return TimeSlots(start, end, duration_minutes)
