# barbermarket/core/lifecycle.py
"""Booking status transitions and who may trigger them.

``permitted_transitions`` is the one place that decides what an actor may do
to a booking. ``plan_transition`` builds on it and returns either the field
changes to apply or a ``TransitionRejected`` explaining which guard failed.
Neither function touches the booking it is given.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional, Union


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


class Party(str, Enum):
    customer = "customer"
    barber = "barber"


class RejectionKind(str, Enum):
    forbidden = "forbidden"  # wrong actor
    conflict = "conflict"    # wrong current state
    invalid = "invalid"      # malformed request


ACTIVE_STATUSES = frozenset({BookingStatus.pending.value, BookingStatus.confirmed.value})


class Rule(NamedTuple):
    sources: FrozenSet[str]
    parties: FrozenSet[Party]
    wrong_party: str
    wrong_state: str


TRANSITIONS: Dict[str, Rule] = {
    BookingStatus.confirmed.value: Rule(
        frozenset({"pending"}),
        frozenset({Party.barber}),
        "Only the barber can confirm bookings",
        "Can only confirm pending bookings",
    ),
    BookingStatus.completed.value: Rule(
        frozenset({"confirmed"}),
        frozenset({Party.barber}),
        "Only the barber can mark bookings as completed",
        "Can only complete confirmed bookings",
    ),
    BookingStatus.cancelled.value: Rule(
        ACTIVE_STATUSES,
        frozenset({Party.customer, Party.barber}),
        "Only the customer or the barber can cancel this booking",
        "Can only cancel pending or confirmed bookings",
    ),
    BookingStatus.no_show.value: Rule(
        ACTIVE_STATUSES,
        frozenset({Party.barber}),
        "Only the barber can mark bookings as no-show",
        "Can only mark pending or confirmed bookings as no-show",
    ),
}


class Actor(NamedTuple):
    user_id: int
    barber_id: Optional[int] = None  # set when the user owns a barber profile


class TransitionRejected(NamedTuple):
    kind: RejectionKind
    reason: str


def _status(value) -> str:
    return value.value if isinstance(value, Enum) else value


def actor_parties(actor: Actor, booking) -> FrozenSet[Party]:
    parties = set()
    if booking.customer_id == actor.user_id:
        parties.add(Party.customer)
    if actor.barber_id is not None and booking.barber_id == actor.barber_id:
        parties.add(Party.barber)
    return frozenset(parties)


def permitted_transitions(actor: Actor, booking) -> FrozenSet[str]:
    parties = actor_parties(actor, booking)
    current = _status(booking.status)
    return frozenset(
        target
        for target, rule in TRANSITIONS.items()
        if current in rule.sources and parties & rule.parties
    )


def plan_transition(
    actor: Actor,
    booking,
    target,
    cancelled_by=None,
    cancellation_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Union[dict, TransitionRejected]:
    target = _status(target)
    current = _status(booking.status)
    parties = actor_parties(actor, booking)

    if not parties:
        return TransitionRejected(RejectionKind.forbidden, "Unauthorized to update this booking")

    rule = TRANSITIONS.get(target)
    if rule is None:
        return TransitionRejected(RejectionKind.invalid, f"Cannot move a booking to '{target}'")

    if not parties & rule.parties:
        return TransitionRejected(RejectionKind.forbidden, rule.wrong_party)

    if target == BookingStatus.cancelled.value:
        if cancelled_by is None:
            return TransitionRejected(RejectionKind.invalid, "Must specify who cancelled the booking")
        side = Party(_status(cancelled_by))
        if side not in parties:
            return TransitionRejected(RejectionKind.forbidden, f"Cannot cancel on behalf of {side.value}")
        if current == BookingStatus.completed.value:
            return TransitionRejected(RejectionKind.conflict, "Cannot cancel completed bookings")

    if current not in rule.sources:
        return TransitionRejected(RejectionKind.conflict, rule.wrong_state)

    now = now or datetime.now(timezone.utc)
    changes = {"status": target, "updated_at": now}
    if target == BookingStatus.confirmed.value:
        changes["confirmed_at"] = now
    elif target == BookingStatus.completed.value:
        changes["completed_at"] = now
    elif target == BookingStatus.cancelled.value:
        changes["cancelled_by"] = side.value
        changes["cancellation_reason"] = cancellation_reason or None
    return changes
