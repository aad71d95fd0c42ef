# barbermarket/schemas.py

from pydantic import BaseModel, Field, HttpUrl, model_validator
from enum import Enum
from datetime import datetime, date
from decimal import Decimal
from typing import List, Optional

from barbermarket.core.lifecycle import BookingStatus, Party

# 24-hour, zero padded
TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    customer = "customer"
    barber = "barber"


class LocationType(str, Enum):
    fixed = "fixed"
    mobile = "mobile"


class Specialty(str, Enum):
    fades = "fades"
    long_hair = "long_hair"
    womens_cuts = "womens_cuts"
    beard_trim = "beard_trim"
    designs = "designs"
    black_hair = "black_hair"
    asian_hair = "asian_hair"
    curly_hair = "curly_hair"
    buzz_cuts = "buzz_cuts"


class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole
    first_name: str
    last_name: str


class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)


class BarberProfileUpsert(BaseModel):
    bio: Optional[str] = Field(default=None, min_length=50, max_length=150)
    years_experience: Optional[int] = Field(default=None, ge=0, le=50)
    specialties: List[Specialty] = Field(min_length=1)
    base_price: Decimal = Field(ge=10, le=30)
    appointment_duration: int = 45
    location_type: LocationType
    location_area: Optional[str] = Field(default=None, max_length=200)
    exact_address: Optional[str] = Field(default=None, max_length=300)
    service_radius_miles: Optional[int] = Field(default=None, ge=0)
    venmo_handle: Optional[str] = Field(default=None, max_length=100)
    zelle_handle: Optional[str] = Field(default=None, max_length=100)
    instagram_handle: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode="after")
    def check_duration(self):
        if self.appointment_duration not in (30, 45, 60):
            raise ValueError("appointment_duration must be 30, 45 or 60")
        return self

    @model_validator(mode="after")
    def check_location(self):
        if self.location_type == LocationType.fixed:
            if not (self.location_area and self.exact_address):
                raise ValueError("Fixed location requires area and exact address")
        elif not self.service_radius_miles:
            raise ValueError("Mobile barbers must specify service radius")
        return self


class BarberProfilePublic(BaseModel):
    id: int
    user_id: int
    bio: Optional[str]
    years_experience: Optional[int]
    specialties: List[str]
    base_price: Decimal
    appointment_duration: int
    location_type: str
    location_area: Optional[str]
    service_radius_miles: Optional[int]
    venmo_handle: Optional[str]
    zelle_handle: Optional[str]
    instagram_handle: Optional[str]
    status: str
    rating_avg: Decimal
    review_count: int


class BarberProfilePrivate(BarberProfilePublic):
    exact_address: Optional[str]


class PortfolioPhotoCreate(BaseModel):
    photo_url: HttpUrl
    caption: Optional[str] = Field(default=None, max_length=200)
    order_index: Optional[int] = Field(default=None, ge=0)  # appended when omitted


class PortfolioPhotoUpdate(BaseModel):
    photo_url: Optional[HttpUrl] = None
    caption: Optional[str] = Field(default=None, max_length=200)
    order_index: Optional[int] = Field(default=None, ge=0)


class PortfolioPhotoPublic(BaseModel):
    id: int
    barber_id: int
    photo_url: str
    caption: Optional[str]
    order_index: int
    created_at: datetime


class ScheduleCreate(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Sun ... 6=Sat
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class SchedulePublic(BaseModel):
    id: int
    barber_id: int
    day_of_week: int
    start_time: str
    end_time: str


class ExceptionCreate(BaseModel):
    date: date
    is_available: bool
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_times(self):
        if self.is_available:
            if not (self.start_time and self.end_time):
                raise ValueError("Start and end times required when adding availability")
            if self.start_time >= self.end_time:
                raise ValueError("Start time must be before end time")
        elif self.start_time or self.end_time:
            raise ValueError("A blocked date cannot have start or end times")
        return self


class ExceptionPublic(BaseModel):
    id: int
    barber_id: int
    date: date
    is_available: bool
    start_time: Optional[str]
    end_time: Optional[str]


class SlotsResponse(BaseModel):
    barber_id: int
    date: date
    day_of_week: int
    appointment_duration: int
    available_slots: List[str]
    total_slots: int
    message: Optional[str] = None


class BookingCreate(BaseModel):
    barber_id: int
    appointment_date: date
    appointment_time: str = Field(pattern=TIME_PATTERN)
    customer_notes: Optional[str] = Field(default=None, max_length=500)
    customer_location: Optional[str] = Field(default=None, max_length=200)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    cancelled_by: Optional[Party] = None
    cancellation_reason: Optional[str] = Field(default=None, max_length=500)


class BookingPublic(BaseModel):
    id: int
    customer_id: int
    barber_id: int
    appointment_date: date
    appointment_time: str
    duration_minutes: int
    price: Decimal
    status: BookingStatus
    customer_notes: Optional[str]
    customer_location: Optional[str]
    cancelled_by: Optional[str]
    cancellation_reason: Optional[str]
    created_at: datetime
    updated_at: datetime
    confirmed_at: Optional[datetime]
    completed_at: Optional[datetime]


class ReviewCreate(BaseModel):
    booking_id: int
    rating: int = Field(ge=1, le=5)
    review_text: Optional[str] = Field(default=None, max_length=500)


class ReviewPublic(BaseModel):
    id: int
    booking_id: int
    customer_id: int
    barber_id: int
    rating: int
    review_text: Optional[str]
    created_at: datetime
