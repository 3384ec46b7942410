"""
Travel Booking API - Repositories
==================================

Thin data-access layer over the SQLAlchemy models. Services never build
queries themselves; they go through these classes.

Every write commits its own transaction.
"""

from datetime import datetime
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import BlacklistedToken, Booking, City, Hotel, OtpRecord, Review, Room, User, utcnow
from logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Generic CRUD repository.
    All entity repositories inherit from this class.
    """

    model: Type[T]

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, id: int) -> Optional[T]:
        return self.db.get(self.model, id)

    def get_all(self) -> List[T]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def exists(self, id: int) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == id).first() is not None

    def add(self, obj: T) -> T:
        """
        Persist a new record.

        Returns:
            The instance with its generated primary key.
        """
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, obj: T) -> T:
        """Commit pending changes on an already-attached instance."""
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj: T) -> None:
        self.db.delete(obj)
        self.db.commit()

    def apply_patch(self, obj: T, changes: dict) -> T:
        """Copy non-None values onto ``obj``, stamp ``last_updated`` and commit."""
        for key, value in changes.items():
            if value is not None and hasattr(obj, key):
                setattr(obj, key, value)
        obj.last_updated = utcnow()
        return self.update(obj)


# ==========================================
# ENTITY REPOSITORIES
# ==========================================

class UserRepository(BaseRepository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def username_exists(self, username: str) -> bool:
        return self.get_by_username(username) is not None

    def get_confirmed_emails(self) -> List[str]:
        rows = self.db.query(User.email).filter(User.is_email_confirmed.is_(True)).all()
        return [row.email for row in rows]

    def delete_expired_unconfirmed(self) -> List[int]:
        """
        Remove unconfirmed users whose OTP records have all expired.

        Returns:
            Ids of the users removed.
        """
        now = utcnow()
        candidates = self.db.query(User).filter(User.is_email_confirmed.is_(False)).all()
        stale = [
            user for user in candidates
            if user.otp_records and all(record.expiration < now for record in user.otp_records)
        ]
        purged_ids = [user.id for user in stale]
        for user in stale:
            self.db.delete(user)
        if stale:
            self.db.commit()
            logger.info(f"Purged {len(stale)} expired unconfirmed users")
        return purged_ids


class OtpRepository(BaseRepository[OtpRecord]):
    model = OtpRecord

    def get_latest(self, email: str, code: str) -> Optional[OtpRecord]:
        """Most recent OTP record (by expiration) for this email and code."""
        return (
            self.db.query(OtpRecord)
            .filter(func.lower(OtpRecord.email) == email.lower(), OtpRecord.code == code)
            .order_by(OtpRecord.expiration.desc())
            .first()
        )


class BlacklistRepository(BaseRepository[BlacklistedToken]):
    model = BlacklistedToken

    def is_active(self, jti: str, now: datetime) -> bool:
        return (
            self.db.query(BlacklistedToken.id)
            .filter(BlacklistedToken.jti == jti, BlacklistedToken.expiration > now)
            .first()
            is not None
        )


class CityRepository(BaseRepository[City]):
    model = City


class HotelRepository(BaseRepository[Hotel]):
    model = Hotel


class RoomRepository(BaseRepository[Room]):
    model = Room

    def filter(self, query: Any) -> List[Room]:
        """
        Rooms matching the optional criteria of ``query``.

        Args:
            query: Object with room_type, min_price, max_price, is_available,
                adult_capacity and children_capacity attributes (None = ignore).
        """
        q = self.db.query(Room)
        if query.room_type is not None:
            q = q.filter(Room.room_type == query.room_type)
        if query.min_price is not None:
            q = q.filter(Room.price_per_night >= query.min_price)
        if query.max_price is not None:
            q = q.filter(Room.price_per_night <= query.max_price)
        if query.is_available is not None:
            q = q.filter(Room.is_available.is_(query.is_available))
        if query.adult_capacity is not None:
            q = q.filter(Room.adult_capacity >= query.adult_capacity)
        if query.children_capacity is not None:
            q = q.filter(Room.children_capacity >= query.children_capacity)
        return q.order_by(Room.id).all()


class BookingRepository(BaseRepository[Booking]):
    model = Booking


class ReviewRepository(BaseRepository[Review]):
    model = Review
