import json
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, Numeric, String, Text, create_engine
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from config import settings
from logging_config import get_logger

logger = get_logger(__name__)


def build_engine(database_url: str):
    """Create an engine; SQLite needs cross-thread access and in-memory DBs a single shared connection."""
    kwargs = {"echo": False}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


engine = build_engine(settings.database_url)
Base = declarative_base()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so every stored datetime is naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class JSONList(TypeDecorator):
    """List of strings stored as JSON text (room images)."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps(value or [])

    def process_result_value(self, value, dialect):
        return json.loads(value) if value else []


# ==========================================
# MODELS (Tables)
# ==========================================

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False)
    first_name = Column(String(50), default="")
    last_name = Column(String(50), default="")
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # salthex$hashhex
    phone_number = Column(String(30), default="")
    date_of_birth = Column(Date, nullable=True)
    address1 = Column(String(50), default="")
    address2 = Column(String(50), default="")
    city = Column(String(100), default="")
    country = Column(String(100), default="")
    driver_license = Column(String(100), default="")
    is_email_confirmed = Column(Boolean, default=False, nullable=False)
    role = Column(String(30), default="User", nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    otp_records = relationship("OtpRecord", back_populates="user", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")


class OtpRecord(Base):
    __tablename__ = "otp_records"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    code = Column(String(12), nullable=False)
    expiration = Column(DateTime, nullable=False)  # UTC
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    user = relationship("User", back_populates="otp_records")


class BlacklistedToken(Base):
    __tablename__ = "blacklisted_tokens"
    id = Column(Integer, primary_key=True, autoincrement=True)
    jti = Column(String(64), nullable=False, index=True)
    expiration = Column(DateTime, nullable=False)  # UTC


class City(Base):
    __tablename__ = "cities"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    country = Column(String(100), nullable=False)
    post_office = Column(String(50), nullable=False)
    number_of_hotels = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    hotels = relationship("Hotel", back_populates="city", cascade="all, delete-orphan")


class Hotel(Base):
    __tablename__ = "hotels"
    id = Column(Integer, primary_key=True, autoincrement=True)
    hotel_name = Column(String(100), nullable=False)
    owner_name = Column(String(50), nullable=False)
    star_rating = Column(Float, default=3, nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, default="")
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    city = relationship("City", back_populates="hotels")
    rooms = relationship("Room", back_populates="hotel", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="hotel", cascade="all, delete-orphan")


class Room(Base):
    __tablename__ = "rooms"
    id = Column(Integer, primary_key=True, autoincrement=True)
    room_type = Column(String(20), nullable=False)
    images = Column(JSONList, default=list)
    description = Column(String(255), default="")
    price_per_night = Column(Numeric(18, 2), nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    adult_capacity = Column(Integer, default=2, nullable=False)
    children_capacity = Column(Integer, default=0, nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    hotel = relationship("Hotel", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room", cascade="all, delete-orphan")


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    total_price = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")


class Review(Base):
    __tablename__ = "reviews"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="reviews")
    hotel = relationship("Hotel", back_populates="reviews")


# ==========================================
# INITIALIZATION
# ==========================================

def seed_admin(session) -> bool:
    """Create the bootstrap administrator from ADMIN_EMAIL / ADMIN_PASSWORD if missing."""
    from security import hash_password

    if not (settings.admin_email and settings.admin_password):
        return False
    if session.query(User).filter(User.email == settings.admin_email).first():
        return False

    session.add(User(
        username=settings.admin_username,
        email=settings.admin_email,
        password=hash_password(settings.admin_password),
        role="Admin",
        is_email_confirmed=True,
    ))
    session.commit()
    logger.info(f"Bootstrap admin created: {settings.admin_email}")
    return True


def init_db(bind=None):
    target = bind or engine
    Base.metadata.create_all(target)

    session = sessionmaker(bind=target)()
    try:
        seed_admin(session)
    finally:
        session.close()


if __name__ == "__main__":
    init_db()
