# barbermarket/ratings.py

from decimal import Decimal, ROUND_HALF_UP

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbermarket.models import BarberProfile, Booking, Review, utcnow


class ReviewRejectedError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def recalculate_barber_rating(session: Session, barber_id: int) -> BarberProfile:
    """Refresh ``rating_avg`` / ``review_count`` from the reviews table.

    Does not commit; callers run it inside the same unit of work as the
    review change so both land together.
    """
    avg, count = session.exec(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.barber_id == barber_id)
    ).one()

    barber = session.get(BarberProfile, barber_id)
    barber.rating_avg = Decimal(str(avg or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    barber.review_count = count
    barber.updated_at = utcnow()
    session.add(barber)
    return barber


def submit_review(session: Session, customer_id: int, request) -> Review:
    booking = session.get(Booking, request.booking_id)
    if booking is None:
        raise ReviewRejectedError("Booking not found", 404)
    if booking.customer_id != customer_id:
        raise ReviewRejectedError("You can only review your own bookings", 403)
    if booking.status != "completed":
        raise ReviewRejectedError("Can only review completed bookings", 400)

    existing = session.exec(select(Review).where(Review.booking_id == booking.id)).first()
    if existing is not None:
        raise ReviewRejectedError("You have already reviewed this booking", 409)

    review = Review(
        booking_id=booking.id,
        customer_id=customer_id,
        barber_id=booking.barber_id,
        rating=request.rating,
        review_text=request.review_text,
    )
    session.add(review)
    try:
        session.flush()
        barber = recalculate_barber_rating(session, booking.barber_id)
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ReviewRejectedError("You have already reviewed this booking", 409)

    session.refresh(review)
    logger.info("Review {} saved; barber {} now {} over {} reviews", review.id, barber.id, barber.rating_avg, barber.review_count)
    return review
