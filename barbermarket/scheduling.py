# barbermarket/scheduling.py
"""Database-backed slot lookup and booking creation.

The core functions in ``barbermarket.core`` are pure; this module feeds them
rows from the session and persists the outcome.
"""

from datetime import date as Date, datetime
from typing import List, NamedTuple, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from barbermarket.core.availability import NO_FITTING_SLOT_REASON, day_of_week, resolve_windows
from barbermarket.core.conflicts import SLOT_TAKEN_REASON, SlotCheck, check_slot, filter_available
from barbermarket.core.lifecycle import ACTIVE_STATUSES
from barbermarket.core.slots import expand_windows
from barbermarket.models import AvailabilityException, BarberProfile, Booking, RecurringAvailability


class BarberNotFoundError(Exception):
    pass


class BookingRejectedError(Exception):
    """The request is well formed but cannot be booked (past date, barber not approved...)."""


class SlotTakenError(Exception):
    def __init__(self, message: str = SLOT_TAKEN_REASON):
        super().__init__(message)
        self.message = message


class AvailableSlots(NamedTuple):
    barber: BarberProfile
    date: Date
    day_of_week: int
    slots: List[str]
    reason: Optional[str] = None


def load_recurring(session: Session, barber_id: int, weekday: int) -> List[RecurringAvailability]:
    return session.exec(
        select(RecurringAvailability)
        .where(RecurringAvailability.barber_id == barber_id)
        .where(RecurringAvailability.day_of_week == weekday)
    ).all()


def load_exception(session: Session, barber_id: int, on_date: Date) -> Optional[AvailabilityException]:
    return session.exec(
        select(AvailabilityException)
        .where(AvailabilityException.barber_id == barber_id)
        .where(AvailabilityException.date == on_date)
    ).first()


def load_active_bookings(session: Session, barber_id: int, on_date: Date) -> List[Booking]:
    return session.exec(
        select(Booking)
        .where(Booking.barber_id == barber_id)
        .where(Booking.appointment_date == on_date)
        .where(col(Booking.status).in_(sorted(ACTIVE_STATUSES)))
    ).all()


def get_approved_barber(session: Session, barber_id: int) -> BarberProfile:
    barber = session.get(BarberProfile, barber_id)
    if barber is None or barber.status != "approved":
        raise BarberNotFoundError("Barber not found or not approved")
    return barber


def get_available_slots(session: Session, barber_id: int, on_date: Date) -> AvailableSlots:
    barber = get_approved_barber(session, barber_id)
    weekday = day_of_week(on_date)

    exception = load_exception(session, barber_id, on_date)
    recurring = [] if exception is not None else load_recurring(session, barber_id, weekday)
    resolved = resolve_windows(recurring, exception)
    if not resolved.windows:
        return AvailableSlots(barber, on_date, weekday, [], resolved.reason)

    duration = barber.appointment_duration
    candidates = expand_windows(resolved.windows, duration)
    if not candidates:
        return AvailableSlots(barber, on_date, weekday, [], NO_FITTING_SLOT_REASON)

    bookings = load_active_bookings(session, barber_id, on_date)
    slots = filter_available(candidates, duration, bookings)
    return AvailableSlots(barber, on_date, weekday, slots)


def is_bookable(session: Session, barber_id: int, on_date: Date, appointment_time: str) -> SlotCheck:
    barber = get_approved_barber(session, barber_id)
    bookings = load_active_bookings(session, barber_id, on_date)
    return check_slot(appointment_time, barber.appointment_duration, bookings)


def create_booking(session: Session, customer_id: int, request, now: Optional[datetime] = None) -> Booking:
    """Insert a pending booking for ``request`` (a ``BookingCreate``).

    Raises ``SlotTakenError`` when the slot overlaps an active booking, either
    on the read-side check or when the unique index rejects the insert.
    """
    barber = session.get(BarberProfile, request.barber_id)
    if barber is None:
        raise BarberNotFoundError("Barber not found")
    if barber.status != "approved":
        raise BookingRejectedError("Barber is not currently accepting bookings")

    starts_at = datetime.combine(request.appointment_date, datetime.strptime(request.appointment_time, "%H:%M").time())
    if starts_at <= (now or datetime.now()):
        raise BookingRejectedError("Appointment must be in the future")

    if barber.location_type == "mobile" and not request.customer_location:
        raise BookingRejectedError("Customer location is required for mobile barbers")

    existing = load_active_bookings(session, barber.id, request.appointment_date)
    check = check_slot(request.appointment_time, barber.appointment_duration, existing)
    if not check.available:
        raise SlotTakenError(check.reason)

    booking = Booking(
        customer_id=customer_id,
        barber_id=barber.id,
        appointment_date=request.appointment_date,
        appointment_time=request.appointment_time,
        duration_minutes=barber.appointment_duration,
        price=barber.base_price,
        status="pending",
        customer_notes=request.customer_notes,
        customer_location=request.customer_location,
    )
    session.add(booking)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning(
            "Lost booking race for barber {} at {} {}",
            barber.id, request.appointment_date, request.appointment_time,
        )
        raise SlotTakenError()

    session.refresh(booking)
    logger.info("Booking {} created for barber {} at {} {}", booking.id, barber.id, booking.appointment_date, booking.appointment_time)
    return booking


def apply_changes(session: Session, booking: Booking, changes: dict) -> Booking:
    for field, value in changes.items():
        setattr(booking, field, value)
    session.add(booking)
    session.commit()
    session.refresh(booking)
    logger.info("Booking {} moved to {}", booking.id, booking.status)
    return booking
