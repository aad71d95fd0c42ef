# barbermarket/routers/portfolio_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlmodel import Session, col, select

from barbermarket.db import get_session
from barbermarket.deps import get_my_barber_profile
from barbermarket.models import BarberProfile, PortfolioPhoto
from barbermarket.schemas import PortfolioPhotoCreate, PortfolioPhotoPublic, PortfolioPhotoUpdate

router = APIRouter(
    prefix="/barbers/me/portfolio",
    tags=["portfolio"],
)


def get_own_photo(session: Session, profile: BarberProfile, photo_id: int) -> PortfolioPhoto:
    photo = session.get(PortfolioPhoto, photo_id)
    if photo is None or photo.barber_id != profile.id:
        raise HTTPException(status_code=404, detail="Photo not found or unauthorized")
    return photo


@router.get("", response_model=List[PortfolioPhotoPublic])
def list_photos(
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    return session.exec(
        select(PortfolioPhoto)
        .where(PortfolioPhoto.barber_id == profile.id)
        .order_by(col(PortfolioPhoto.order_index), col(PortfolioPhoto.id))
    ).all()


@router.post("", response_model=PortfolioPhotoPublic, status_code=201)
def add_photo(
    photo: PortfolioPhotoCreate,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    order_index = photo.order_index
    if order_index is None:
        order_index = session.exec(
            select(func.count(PortfolioPhoto.id)).where(PortfolioPhoto.barber_id == profile.id)
        ).one()

    db_photo = PortfolioPhoto(
        barber_id=profile.id,
        photo_url=str(photo.photo_url),
        caption=photo.caption,
        order_index=order_index,
    )
    session.add(db_photo)
    session.commit()
    session.refresh(db_photo)
    return db_photo


@router.patch("/{photo_id}", response_model=PortfolioPhotoPublic)
def update_photo(
    photo_id: int,
    changes: PortfolioPhotoUpdate,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    db_photo = get_own_photo(session, profile, photo_id)

    data = changes.model_dump(exclude_unset=True)
    # only the caption can be cleared
    for field in ("photo_url", "order_index"):
        if data.get(field) is None:
            data.pop(field, None)
    if "photo_url" in data:
        data["photo_url"] = str(data["photo_url"])
    for field, value in data.items():
        setattr(db_photo, field, value)

    session.add(db_photo)
    session.commit()
    session.refresh(db_photo)
    return db_photo


@router.delete("/{photo_id}", status_code=204)
def delete_photo(
    photo_id: int,
    session: Session = Depends(get_session),
    profile: BarberProfile = Depends(get_my_barber_profile),
):
    db_photo = get_own_photo(session, profile, photo_id)
    session.delete(db_photo)
    session.commit()
