# Shared helpers for the API tests.
# They insert users straight through the ORM, mint bearer headers and create
# cities, hotels and rooms through the public endpoints.

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from database import User
from notifications import OtpChannel, OtpSenderStrategy
from security import create_access_token, hash_password

DEFAULT_PASSWORD = "Secret123!"


class RecordingOtpSender(OtpSenderStrategy):
    """Keeps every OTP instead of delivering it."""

    def __init__(self, channel: OtpChannel, outbox: List[Tuple[str, str, str]]):
        self.channel = channel
        self.outbox = outbox

    def send_otp(self, to: str, otp: str) -> None:
        self.outbox.append((self.channel.value, to, otp))


def make_user(db: Session, **overrides: Any) -> User:
    """Insert a confirmed user directly through the ORM."""
    values: Dict[str, Any] = {
        "username": "traveler",
        "first_name": "Tara",
        "last_name": "Voyager",
        "email": "tara@example.com",
        "password": hash_password(overrides.pop("plain_password", DEFAULT_PASSWORD)),
        "phone_number": "+970 599 123 456",
        "role": "User",
        "is_email_confirmed": True,
    }
    values.update(overrides)
    user = User(**values)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user: User) -> Dict[str, str]:
    token = create_access_token(user.email, user.role, user.id).token
    return {"Authorization": f"Bearer {token}"}


def create_city(client: TestClient, headers: Dict[str, str], **overrides: Any) -> Dict[str, Any]:
    payload = {"name": "Nablus", "country": "Palestine", "post_office": "P400", "number_of_hotels": 3}
    payload.update(overrides)
    response = client.post("/api/v1/cities", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_hotel(client: TestClient, headers: Dict[str, str], city_id: int, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "hotel_name": "Grand Olive",
        "owner_name": "Omar Saleh",
        "star_rating": 4.5,
        "location": "Old City",
        "description": "Boutique hotel near the market",
        "city_id": city_id,
    }
    payload.update(overrides)
    response = client.post("/api/v1/hotels", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_room(client: TestClient, headers: Dict[str, str], hotel_id: int, **overrides: Any) -> Dict[str, Any]:
    payload = {
        "room_type": "Standard",
        "images": ["https://img.example.com/r1.jpg"],
        "description": "City view",
        "price_per_night": 120.0,
        "is_available": True,
        "adult_capacity": 2,
        "children_capacity": 0,
        "hotel_id": hotel_id,
    }
    payload.update(overrides)
    response = client.post("/api/v1/rooms", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
