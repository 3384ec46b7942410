"""
Travel Booking API - Validation Schemas (Pydantic)
===================================================

Data Transfer Objects with business-rule validation using Pydantic v2.

- *WriteDTO: request body for POST (required fields enforced)
- *PatchDTO: request body for PATCH (every field optional, None = keep)
- *ReadDTO: response body, built from ORM objects (from_attributes)

Validations implemented:
- Names start with an uppercase letter, phone numbers follow a loose E.164 shape
- Password and confirmation must match
- Ranges for ratings, prices and capacities
- Booking check-out must be after check-in
"""

import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from notifications import OtpChannel


# ==========================================
# SHARED VALIDATORS
# ==========================================

NAME_PATTERN = re.compile(r"^[A-Z][a-zA-Z\s]*$")
PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-\(\)]{7,20}$")


def validate_person_name(value: Optional[str]) -> Optional[str]:
    """First/last names: leading uppercase letter, letters and spaces only."""
    if value is None:
        return value
    value = value.strip()
    if not NAME_PATTERN.match(value):
        raise ValueError("Name must start with an uppercase letter and contain only letters and spaces")
    return value


def validate_phone_format(phone: Optional[str]) -> Optional[str]:
    if phone is None:
        return phone
    phone = phone.strip()
    if not PHONE_PATTERN.match(phone):
        raise ValueError("Invalid phone number format.")
    return phone


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored datetimes are naive UTC; aware inputs are converted."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ReadModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ==========================================
# AUTH SCHEMAS
# ==========================================

class LoginRequest(BaseModel):
    """Login with email or username."""
    email: Optional[str] = Field(default=None, description="Email (or use username)")
    username: Optional[str] = Field(default=None, description="Username (or use email)")
    password: str = Field(..., min_length=1, description="Password")


class LoginResponse(BaseModel):
    token: str
    user_id: int
    expires_at: datetime


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr
    channel: OtpChannel = Field(default=OtpChannel.EMAIL, description="OTP delivery channel")


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)
    confirm_password: str = Field(..., min_length=8)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Password do not match.")
        return self


class MessageResponse(BaseModel):
    message: str


# ==========================================
# USER SCHEMAS
# ==========================================

class UserWriteDTO(BaseModel):
    """
    Schema to create a user.

    Validations:
    - first_name / last_name: uppercase initial, max 50
    - password: min 8 chars, must equal confirm_password
    - phone_number: digits, spaces, dashes, parentheses, optional leading +
    """
    username: str = Field(..., min_length=1, max_length=100)
    first_name: str = Field(..., max_length=50)
    last_name: str = Field(..., max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str = Field(..., min_length=8)
    phone_number: str = Field(..., max_length=30)
    date_of_birth: Optional[date] = None
    address1: str = Field(default="", max_length=50)
    address2: str = Field(default="", max_length=50)
    city: str = Field(default="", max_length=100)
    country: str = Field(default="", max_length=100)
    driver_license: str = Field(default="", max_length=100)
    role: Literal["User", "Admin"] = "User"

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, v: str) -> str:
        return validate_person_name(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return validate_phone_format(v)

    @field_validator('date_of_birth')
    @classmethod
    def validate_birth_date(cls, v: Optional[date]) -> Optional[date]:
        if v and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Password do not match.")
        return self


class UserRegisterDTO(UserWriteDTO):
    """Self-registration; the OTP goes out on ``otp_channel``."""
    otp_channel: OtpChannel = OtpChannel.EMAIL


class UserPatchDTO(BaseModel):
    username: Optional[str] = Field(default=None, min_length=1, max_length=100)
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    confirm_password: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, max_length=30)
    date_of_birth: Optional[date] = None
    address1: Optional[str] = Field(default=None, max_length=50)
    address2: Optional[str] = Field(default=None, max_length=50)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    driver_license: Optional[str] = Field(default=None, max_length=100)
    role: Optional[Literal["User", "Admin"]] = None

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, v: Optional[str]) -> Optional[str]:
        return validate_person_name(v)

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return validate_phone_format(v)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password is not None and self.password != self.confirm_password:
            raise ValueError("Password do not match.")
        return self


class UserReadDTO(ReadModel):
    """Public view of a user (never includes the password hash)."""
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    role: str
    is_email_confirmed: bool
    last_updated: datetime


# ==========================================
# CITY SCHEMAS
# ==========================================

class CityWriteDTO(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    country: str = Field(..., min_length=3, max_length=100)
    post_office: str = Field(..., min_length=3, max_length=50)
    number_of_hotels: int = Field(..., ge=1)


class CityPatchDTO(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    country: Optional[str] = Field(default=None, min_length=3, max_length=100)
    post_office: Optional[str] = Field(default=None, min_length=3, max_length=50)
    number_of_hotels: Optional[int] = Field(default=None, ge=1)


class CityReadDTO(ReadModel):
    id: int
    name: str
    country: str
    post_office: str
    number_of_hotels: int
    created_at: datetime
    updated_at: datetime
    last_updated: datetime


# ==========================================
# HOTEL SCHEMAS
# ==========================================

class HotelWriteDTO(BaseModel):
    hotel_name: str = Field(..., min_length=3, max_length=100)
    owner_name: str = Field(..., min_length=3, max_length=50)
    star_rating: float = Field(..., ge=0, le=5, description="Star rating must be between 0 and 5")
    location: str = Field(..., min_length=1)
    description: str = Field(default="")
    city_id: int = Field(..., ge=1)


class HotelPatchDTO(BaseModel):
    hotel_name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    owner_name: Optional[str] = Field(default=None, min_length=3, max_length=50)
    star_rating: Optional[float] = Field(default=None, ge=0, le=5)
    location: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    city_id: Optional[int] = Field(default=None, ge=1)


class HotelReadDTO(ReadModel):
    id: int
    hotel_name: str
    owner_name: str
    star_rating: float
    location: str
    description: str
    city_id: int
    last_updated: datetime


# ==========================================
# ROOM SCHEMAS
# ==========================================

class RoomType(str, Enum):
    STANDARD = "Standard"
    DELUXE = "Deluxe"
    SUITE = "Suite"
    FAMILY = "Family"
    SINGLE = "Single"
    DOUBLE = "Double"


class RoomWriteDTO(BaseModel):
    """
    Schema to create a room.

    Validations:
    - price_per_night >= 1
    - capacities >= 0 (defaults: 2 adults, 0 children)
    - description: short label, max 10 chars
    """
    room_type: RoomType
    images: List[str] = Field(default_factory=list, description="Image URLs")
    description: str = Field(default="", max_length=10)
    price_per_night: float = Field(..., ge=1)
    is_available: bool = True
    adult_capacity: int = Field(default=2, ge=0)
    children_capacity: int = Field(default=0, ge=0)
    hotel_id: int = Field(..., ge=1)


class RoomPatchDTO(BaseModel):
    room_type: Optional[RoomType] = None
    images: Optional[List[str]] = None
    description: Optional[str] = Field(default=None, max_length=10)
    price_per_night: Optional[float] = Field(default=None, ge=1)
    is_available: Optional[bool] = None
    adult_capacity: Optional[int] = Field(default=None, ge=0)
    children_capacity: Optional[int] = Field(default=None, ge=0)
    hotel_id: Optional[int] = Field(default=None, ge=1)


class RoomQueryDTO(BaseModel):
    """List filters; capacities are minimums."""
    room_type: Optional[RoomType] = None
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    is_available: Optional[bool] = None
    adult_capacity: Optional[int] = Field(default=None, ge=0)
    children_capacity: Optional[int] = Field(default=None, ge=0)

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class RoomReadDTO(ReadModel):
    id: int
    room_type: str
    images: List[str]
    description: str
    price_per_night: float
    is_available: bool
    adult_capacity: int
    children_capacity: int
    hotel_id: int
    created_at: datetime
    updated_at: datetime
    last_updated: datetime


# ==========================================
# BOOKING SCHEMAS
# ==========================================

class BookingWriteDTO(BaseModel):
    """
    Schema to create a booking.

    Defaults (applied by BookingService):
    - check_in_date: now
    - check_out_date: check_in_date + 1 day
    - total_price: nights x room price per night
    """
    user_id: int = Field(..., ge=1)
    room_id: int = Field(..., ge=1)
    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None
    total_price: Optional[float] = Field(default=None, ge=0)

    @field_validator('check_in_date', 'check_out_date')
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode='after')
    def validate_date_coherence(self):
        if self.check_in_date and self.check_out_date and self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class BookingPatchDTO(BaseModel):
    room_id: Optional[int] = Field(default=None, ge=1)
    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None
    total_price: Optional[float] = Field(default=None, ge=1)

    @field_validator('check_in_date', 'check_out_date')
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class BookingReadDTO(ReadModel):
    id: int
    user_id: int
    room_id: int
    check_in_date: datetime
    check_out_date: datetime
    total_price: float
    created_at: datetime
    last_updated: datetime


# ==========================================
# REVIEW SCHEMAS
# ==========================================

class ReviewWriteDTO(BaseModel):
    user_id: int = Field(..., ge=1)
    hotel_id: int = Field(..., ge=1)
    rating: int = Field(..., ge=0, le=5)
    comment: str = Field(..., min_length=5)


class ReviewPatchDTO(BaseModel):
    rating: Optional[int] = Field(default=None, ge=0, le=5)
    comment: Optional[str] = Field(default=None, min_length=5)


class ReviewReadDTO(ReadModel):
    id: int
    user_id: int
    hotel_id: int
    rating: int
    comment: str
    created_at: datetime
    last_updated: datetime
