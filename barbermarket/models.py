# barbermarket/models.py

from typing import List, Optional
from datetime import datetime, date as Date, timezone
from decimal import Decimal

from sqlalchemy import Index, UniqueConstraint, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str  # customer or barber
    first_name: str = ""
    last_name: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class BarberProfile(SQLModel, table=True):
    __tablename__ = "barber_profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True)

    bio: Optional[str] = None
    years_experience: Optional[int] = None
    specialties: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    base_price: Decimal = Field(max_digits=10, decimal_places=2)
    appointment_duration: int = 45  # 30, 45 or 60

    location_type: str  # fixed or mobile
    location_area: Optional[str] = None
    exact_address: Optional[str] = None  # only shown to the barber
    service_radius_miles: Optional[int] = None  # mobile only

    # payment is off-platform
    venmo_handle: Optional[str] = None
    zelle_handle: Optional[str] = None
    instagram_handle: Optional[str] = None

    status: str = "pending"  # pending, approved, rejected

    # maintained by ratings.recalculate_barber_rating
    rating_avg: Decimal = Field(default=Decimal("0.00"), max_digits=3, decimal_places=2)
    review_count: int = 0

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class RecurringAvailability(SQLModel, table=True):
    __tablename__ = "availability_schedule"

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber_profiles.id", index=True)
    day_of_week: int  # 0=Sun ... 6=Sat
    start_time: str  # HH:MM
    end_time: str
    created_at: datetime = Field(default_factory=utcnow)


class AvailabilityException(SQLModel, table=True):
    __tablename__ = "availability_exceptions"
    __table_args__ = (
        UniqueConstraint("barber_id", "date", name="uq_exception_barber_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber_profiles.id", index=True)
    date: Date
    is_available: bool
    start_time: Optional[str] = None  # only when is_available
    end_time: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


ACTIVE_BOOKING_CLAUSE = text("status IN ('pending', 'confirmed')")


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # only one active booking per barber/date/time
        Index(
            "prevent_double_booking",
            "barber_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            sqlite_where=ACTIVE_BOOKING_CLAUSE,
            postgresql_where=ACTIVE_BOOKING_CLAUSE,
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="user.id", index=True)
    barber_id: int = Field(foreign_key="barber_profiles.id", index=True)

    appointment_date: Date
    appointment_time: str  # HH:MM
    duration_minutes: int
    price: Decimal = Field(max_digits=10, decimal_places=2)
    status: str = "pending"

    customer_notes: Optional[str] = None
    customer_location: Optional[str] = None

    cancelled_by: Optional[str] = None  # customer or barber
    cancellation_reason: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class Review(SQLModel, table=True):
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    booking_id: int = Field(foreign_key="bookings.id", unique=True)
    customer_id: int = Field(foreign_key="user.id")
    barber_id: int = Field(foreign_key="barber_profiles.id", index=True)
    rating: int
    review_text: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class PortfolioPhoto(SQLModel, table=True):
    __tablename__ = "portfolio_photos"

    id: Optional[int] = Field(default=None, primary_key=True)
    barber_id: int = Field(foreign_key="barber_profiles.id", index=True)
    photo_url: str
    caption: Optional[str] = None
    order_index: int = 0  # 0 is shown first
    created_at: datetime = Field(default_factory=utcnow)
