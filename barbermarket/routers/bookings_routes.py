# barbermarket/routers/bookings_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, col, select

from barbermarket.auth import get_current_user
from barbermarket.core.lifecycle import Actor, BookingStatus, RejectionKind, TransitionRejected, actor_parties, plan_transition
from barbermarket.db import get_session
from barbermarket.deps import get_actor, require_role
from barbermarket.models import Booking
from barbermarket.scheduling import (
    BarberNotFoundError,
    BookingRejectedError,
    SlotTakenError,
    apply_changes,
    create_booking,
)
from barbermarket.schemas import BookingCreate, BookingPublic, BookingStatusUpdate

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)

REJECTION_STATUS = {
    RejectionKind.forbidden: 403,
    RejectionKind.conflict: 409,
    RejectionKind.invalid: 400,
}


@router.post("", response_model=BookingPublic, status_code=201)
def book_appointment(
    booking: BookingCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "customer")

    try:
        return create_booking(session, current_user["id"], booking)
    except BarberNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BookingRejectedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SlotTakenError as e:
        # caller should refetch slots and pick another time
        raise HTTPException(status_code=409, detail=e.message)


@router.get("", response_model=List[BookingPublic])
def list_my_bookings(
    role: str = "customer",
    status: Optional[BookingStatus] = None,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    if role not in ("customer", "barber"):
        raise HTTPException(status_code=422, detail="role must be 'customer' or 'barber'")

    if role == "barber":
        if actor.barber_id is None:
            return []
        stmt = select(Booking).where(Booking.barber_id == actor.barber_id)
    else:
        stmt = select(Booking).where(Booking.customer_id == actor.user_id)

    if status is not None:
        stmt = stmt.where(Booking.status == status.value)

    stmt = stmt.order_by(col(Booking.appointment_date).desc(), col(Booking.appointment_time).desc())
    return session.exec(stmt).all()


def _get_party_booking(session: Session, booking_id: int, actor: Actor) -> Booking:
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    if not actor_parties(actor, booking):
        raise HTTPException(status_code=403, detail="Unauthorized to access this booking")
    return booking


@router.get("/{booking_id}", response_model=BookingPublic)
def get_booking(
    booking_id: int,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    return _get_party_booking(session, booking_id, actor)


@router.patch("/{booking_id}", response_model=BookingPublic)
def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    booking = _get_party_booking(session, booking_id, actor)

    changes = plan_transition(
        actor,
        booking,
        update.status,
        cancelled_by=update.cancelled_by,
        cancellation_reason=update.cancellation_reason,
    )
    if isinstance(changes, TransitionRejected):
        raise HTTPException(status_code=REJECTION_STATUS[changes.kind], detail=changes.reason)

    return apply_changes(session, booking, changes)
