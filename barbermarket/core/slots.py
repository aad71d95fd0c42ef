# barbermarket/core/slots.py

from typing import Iterable, List

from barbermarket.core.availability import Window
from barbermarket.core.timeutils import generate_time_slots


def expand_windows(windows: Iterable[Window], duration_minutes: int) -> List[str]:
    """Candidate slot starts for every window, in window order.

    Windows are expanded independently; partial trailing slots are dropped.
    """
    slots = []
    for window in windows:
        slots.extend(generate_time_slots(window.start, window.end, duration_minutes))
    return slots
