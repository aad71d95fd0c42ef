# barbermarket/routers/availability_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbermarket.core.availability import Window, windows_overlap
from barbermarket.db import get_session
from barbermarket.deps import get_my_barber_profile
from barbermarket.models import AvailabilityException, BarberProfile, RecurringAvailability
from barbermarket.schemas import ExceptionCreate, ExceptionPublic, ScheduleCreate, SchedulePublic

router = APIRouter(
    prefix="/barbers/me",
    tags=["availability"],
)


@router.get("/schedule", response_model=List[SchedulePublic])
def list_schedule(
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    return session.exec(
        select(RecurringAvailability)
        .where(RecurringAvailability.barber_id == profile.id)
        .order_by(RecurringAvailability.day_of_week, RecurringAvailability.start_time)
    ).all()


@router.post("/schedule", response_model=SchedulePublic, status_code=201)
def add_schedule(
    slot: ScheduleCreate,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    same_day = session.exec(
        select(RecurringAvailability)
        .where(RecurringAvailability.barber_id == profile.id)
        .where(RecurringAvailability.day_of_week == slot.day_of_week)
    ).all()

    # overlapping rows would produce duplicate slots
    new_window = Window(slot.start_time, slot.end_time)
    for row in same_day:
        if windows_overlap(new_window, Window(row.start_time, row.end_time)):
            raise HTTPException(
                status_code=409,
                detail=f"Overlaps existing availability {row.start_time}-{row.end_time}",
            )

    db_slot = RecurringAvailability(
        barber_id=profile.id,
        day_of_week=slot.day_of_week,
        start_time=slot.start_time,
        end_time=slot.end_time,
    )
    session.add(db_slot)
    session.commit()
    session.refresh(db_slot)
    return db_slot


@router.delete("/schedule/{slot_id}", status_code=204)
def delete_schedule(
    slot_id: int,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    db_slot = session.get(RecurringAvailability, slot_id)
    if db_slot is None or db_slot.barber_id != profile.id:
        raise HTTPException(status_code=404, detail="Slot not found or unauthorized")
    session.delete(db_slot)
    session.commit()


@router.get("/exceptions", response_model=List[ExceptionPublic])
def list_exceptions(
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    return session.exec(
        select(AvailabilityException)
        .where(AvailabilityException.barber_id == profile.id)
        .order_by(AvailabilityException.date)
    ).all()


@router.post("/exceptions", response_model=ExceptionPublic, status_code=201)
def add_exception(
    exception: ExceptionCreate,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    db_exception = AvailabilityException(
        barber_id=profile.id,
        date=exception.date,
        is_available=exception.is_available,
        start_time=exception.start_time if exception.is_available else None,
        end_time=exception.end_time if exception.is_available else None,
    )
    session.add(db_exception)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="An exception already exists for that date")

    session.refresh(db_exception)
    logger.info(
        "Barber {} {} {}",
        profile.id, "opened" if db_exception.is_available else "blocked", db_exception.date,
    )
    return db_exception


@router.delete("/exceptions/{exception_id}", status_code=204)
def delete_exception(
    exception_id: int,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    db_exception = session.get(AvailabilityException, exception_id)
    if db_exception is None or db_exception.barber_id != profile.id:
        raise HTTPException(status_code=404, detail="Exception not found or unauthorized")
    session.delete(db_exception)
    session.commit()
