# barbermarket/routers/barbers_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, col, select

from barbermarket.auth import get_current_user
from barbermarket.config import settings
from barbermarket.db import get_session
from barbermarket.deps import find_barber_profile, get_my_barber_profile, require_role
from barbermarket.models import BarberProfile, PortfolioPhoto, Review, utcnow
from barbermarket.scheduling import BarberNotFoundError, get_available_slots
from barbermarket.schemas import (
    BarberProfilePrivate,
    BarberProfilePublic,
    BarberProfileUpsert,
    PortfolioPhotoPublic,
    ReviewPublic,
    SlotsResponse,
)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.put("/me/profile", response_model=BarberProfilePrivate)
def upsert_profile(
    profile: BarberProfileUpsert,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "barber")

    data = profile.model_dump()
    data["location_type"] = profile.location_type.value
    data["specialties"] = [s.value for s in profile.specialties]

    # one profile per barber user
    db_profile = find_barber_profile(session, current_user["id"])
    if db_profile is None:
        db_profile = BarberProfile(
            user_id=current_user["id"],
            status="approved" if settings.AUTO_APPROVE_BARBERS else "pending",
            **data,
        )
    else:
        # existing bookings keep the duration/price they were created with
        for field, value in data.items():
            setattr(db_profile, field, value)
        db_profile.updated_at = utcnow()

    session.add(db_profile)
    session.commit()
    session.refresh(db_profile)
    return db_profile


@router.get("/me/profile", response_model=BarberProfilePrivate)
def get_my_profile(profile: BarberProfile = Depends(get_my_barber_profile)):
    return profile


@router.get("", response_model=List[BarberProfilePublic])
def list_barbers(session: Session = Depends(get_session)):
    return session.exec(
        select(BarberProfile)
        .where(BarberProfile.status == "approved")
        .order_by(col(BarberProfile.rating_avg).desc())
    ).all()


@router.get("/{barber_id}", response_model=BarberProfilePublic)
def get_barber(barber_id: int, session: Session = Depends(get_session)):
    profile = session.get(BarberProfile, barber_id)
    if profile is None or profile.status != "approved":
        raise HTTPException(status_code=404, detail="Barber not found")
    return profile


@router.get("/{barber_id}/slots", response_model=SlotsResponse)
def barber_slots(
    barber_id: int,
    date: date,
    session: Session = Depends(get_session),
):
    try:
        result = get_available_slots(session, barber_id, date)
    except BarberNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "barber_id": barber_id,
        "date": date,
        "day_of_week": result.day_of_week,
        "appointment_duration": result.barber.appointment_duration,
        "available_slots": result.slots,
        "total_slots": len(result.slots),
        "message": result.reason,
    }


@router.get("/{barber_id}/reviews", response_model=List[ReviewPublic])
def barber_reviews(barber_id: int, session: Session = Depends(get_session)):
    return session.exec(
        select(Review)
        .where(Review.barber_id == barber_id)
        .order_by(col(Review.created_at).desc())
    ).all()


@router.get("/{barber_id}/portfolio", response_model=List[PortfolioPhotoPublic])
def barber_portfolio(barber_id: int, session: Session = Depends(get_session)):
    return session.exec(
        select(PortfolioPhoto)
        .where(PortfolioPhoto.barber_id == barber_id)
        .order_by(col(PortfolioPhoto.order_index), col(PortfolioPhoto.id))
    ).all()
