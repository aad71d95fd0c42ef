# barbermarket/routers/reviews_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barbermarket.auth import get_current_user
from barbermarket.db import get_session
from barbermarket.deps import require_role
from barbermarket.ratings import ReviewRejectedError, submit_review
from barbermarket.schemas import ReviewCreate, ReviewPublic

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
)


@router.post("", response_model=ReviewPublic, status_code=201)
def create_review(
    review: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "customer")
    try:
        return submit_review(session, current_user["id"], review)
    except ReviewRejectedError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
