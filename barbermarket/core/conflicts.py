# barbermarket/core/conflicts.py

from typing import Iterable, List, NamedTuple, Optional, Tuple

from barbermarket.core.lifecycle import ACTIVE_STATUSES
from barbermarket.core.timeutils import time_to_minutes

SLOT_TAKEN_REASON = "This time slot is no longer available"


class SlotCheck(NamedTuple):
    available: bool
    reason: Optional[str] = None


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals: [a_start, a_end) and [b_start, b_end)
    return a_start < b_end and a_end > b_start


def occupied_interval(booking) -> Tuple[int, int]:
    start = time_to_minutes(booking.appointment_time)
    return start, start + booking.duration_minutes


def active_only(bookings: Iterable) -> list:
    return [b for b in bookings if b.status in ACTIVE_STATUSES]


def is_slot_blocked(slot: str, duration_minutes: int, bookings: Iterable) -> bool:
    slot_start = time_to_minutes(slot)
    slot_end = slot_start + duration_minutes
    for booking in bookings:
        busy_start, busy_end = occupied_interval(booking)
        if overlaps(slot_start, slot_end, busy_start, busy_end):
            return True
    return False


def filter_available(slots: Iterable[str], duration_minutes: int, bookings: Iterable) -> List[str]:
    """Drop every slot that overlaps an active booking. Order is kept."""
    active = active_only(bookings)
    return [slot for slot in slots if not is_slot_blocked(slot, duration_minutes, active)]


def check_slot(appointment_time: str, duration_minutes: int, bookings: Iterable) -> SlotCheck:
    if is_slot_blocked(appointment_time, duration_minutes, active_only(bookings)):
        return SlotCheck(False, SLOT_TAKEN_REASON)
    return SlotCheck(True)
