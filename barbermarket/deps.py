# barbermarket/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session, select

from barbermarket.auth import get_current_user
from barbermarket.core.lifecycle import Actor
from barbermarket.db import get_session
from barbermarket.models import BarberProfile


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def find_barber_profile(session: Session, user_id: int):
    return session.exec(
        select(BarberProfile).where(BarberProfile.user_id == user_id)
    ).first()


def get_my_barber_profile(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
) -> BarberProfile:
    require_role(current_user, "barber")
    profile = find_barber_profile(session, current_user["id"])
    if profile is None:
        raise HTTPException(status_code=404, detail="Barber profile not found. Create a profile first.")
    return profile


def get_actor(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
) -> Actor:
    profile = find_barber_profile(session, current_user["id"])
    return Actor(user_id=current_user["id"], barber_id=profile.id if profile else None)
