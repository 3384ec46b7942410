from datetime import timedelta
from functools import wraps
from typing import List, Optional

from sqlalchemy.orm import Session

from cache import cache
from config import settings
from database import SessionLocal, User, City, Hotel, Room, Booking, Review, OtpRecord, BlacklistedToken, utcnow
from exceptions import (
    DuplicatedEmailError,
    DuplicatedUsernameError,
    EmailNotConfirmedError,
    ExpiredOtpError,
    InvalidOtpError,
    NotFoundError,
    ValidationAppError,
)
from logging_config import get_logger
from notifications import OtpChannel, OtpSenderFactory, hotel_publisher
from repositories import (
    BlacklistRepository,
    BookingRepository,
    CityRepository,
    HotelRepository,
    OtpRepository,
    ReviewRepository,
    RoomRepository,
    UserRepository,
)
from schemas import (
    BookingPatchDTO, BookingReadDTO, BookingWriteDTO,
    CityPatchDTO, CityReadDTO, CityWriteDTO,
    HotelPatchDTO, HotelReadDTO, HotelWriteDTO,
    LoginRequest, LoginResponse,
    ResetPasswordRequest,
    ReviewPatchDTO, ReviewReadDTO, ReviewWriteDTO,
    RoomPatchDTO, RoomQueryDTO, RoomReadDTO, RoomWriteDTO,
    UserPatchDTO, UserReadDTO, UserRegisterDTO, UserWriteDTO,
)
from security import create_access_token, generate_otp, hash_password, verify_password

# Module logger
logger = get_logger(__name__)


# ==========================================
# SESSION HANDLING
# ==========================================

def with_db(func):
    """
    Session-aware decorator for service methods.

    - If a Session is passed as first argument or as ``db=``: use it and leave
      its lifecycle to the caller (FastAPI ``Depends(get_db)``).
    - Otherwise: open a session from SessionLocal, roll back on error and
      close it afterwards (scripts, init tasks).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if args and isinstance(args[0], Session):
            return func(*args, **kwargs)
        if kwargs.get('db') is not None:
            return func(*args, **kwargs)

        kwargs.pop('db', None)
        db = SessionLocal()
        try:
            return func(db, *args, **kwargs)
        except Exception as e:
            db.rollback()
            logger.error(f"Error in {func.__name__}: {e}")
            raise
        finally:
            db.close()

    return wrapper


# ==========================================
# CACHE HELPERS
# ==========================================

LIST_KEYS = {
    "user": "users-list",
    "city": "cities-list",
    "hotel": "hotels-list",
    "room": "rooms-list",
    "booking": "bookings-list",
    "review": "reviews-list",
}


def _list_key(entity: str) -> str:
    return LIST_KEYS[entity]


def _item_key(entity: str, item_id: int) -> str:
    return f"{entity}_{item_id}"


def _cache_store(key: str, value, minutes: int):
    cache.set(key, value, absolute_minutes=minutes, sliding_minutes=settings.sliding_expiration_minutes)
    return value


def _invalidate(entity: str, item_id: Optional[int] = None, *cascaded: str):
    """Drop the list key and item key of ``entity`` plus every key of cascaded entities."""
    logger.debug(f"Deleting cached data for {entity}")
    cache.remove(_list_key(entity))
    if item_id is not None:
        cache.remove(_item_key(entity, item_id))
    for child in cascaded:
        cache.remove(_list_key(child))
        cache.remove_prefix(f"{child}_")


# ==========================================
# AUTH
# ==========================================

class TokenBlacklistService:
    """Server-side revocation list keyed by token jti."""

    @staticmethod
    @with_db
    def is_token_blacklisted(db: Session, jti: str) -> bool:
        if not jti:
            raise ValidationAppError("Token jti is required")
        return BlacklistRepository(db).is_active(jti, utcnow())

    @staticmethod
    @with_db
    def add_token_to_blacklist(db: Session, jti: str, expiration) -> None:
        """
        Revoke a token until its own expiration.

        Args:
            jti: Token id claim.
            expiration: Naive UTC datetime when the token stops being valid.
        """
        if not jti:
            raise ValidationAppError("Token jti is required")
        if expiration <= utcnow():
            raise ValidationAppError("Token expiration is already in the past")

        BlacklistRepository(db).add(BlacklistedToken(jti=jti, expiration=expiration))
        logger.info(f"Token {jti} blacklisted until {expiration}")


class AuthService:
    """Login, registration and OTP flows."""

    @staticmethod
    @with_db
    def login(db: Session, data: LoginRequest) -> LoginResponse:
        """
        Authenticate by email or username.

        Raises:
            ValidationAppError: neither email nor username given, or wrong password.
            NotFoundError: no such user.
            EmailNotConfirmedError: the OTP was never verified.
        """
        logger.info("Login request received")
        if not (data.email and data.email.strip()) and not (data.username and data.username.strip()):
            logger.warning("Login attempt without email or username")
            raise ValidationAppError("Email or username is required")

        users = UserRepository(db)
        user = users.get_by_email(data.email) if data.email else users.get_by_username(data.username)
        if user is None:
            logger.warning(f"Login failed, user not found: {data.email or data.username}")
            raise NotFoundError("User not found")

        if not verify_password(data.password, user.password):
            logger.warning(f"Invalid password attempt for user {user.id}")
            raise ValidationAppError("Invalid password")

        if not user.is_email_confirmed:
            logger.warning(f"Login blocked, email not confirmed for user {user.id}")
            raise EmailNotConfirmedError("Email address has not been confirmed")

        result = create_access_token(user.email, user.role, user.id)
        logger.info(f"Token generated for user {user.id}")
        return LoginResponse(token=result.token, user_id=user.id, expires_at=result.expires_at)

    @staticmethod
    @with_db
    def register(db: Session, data: UserRegisterDTO, sender_factory: OtpSenderFactory) -> UserReadDTO:
        """
        Create an unconfirmed user and send the verification OTP.

        Returns:
            The created user (still unconfirmed).
        """
        logger.info(f"Registration request received for {data.email}")
        users = UserRepository(db)
        for purged_id in users.delete_expired_unconfirmed():
            _invalidate("user", purged_id, "booking", "review")

        if users.email_exists(data.email):
            logger.warning(f"Registration rejected, email already exists: {data.email}")
            raise DuplicatedEmailError("Email already exists")
        if users.username_exists(data.username):
            logger.warning(f"Registration rejected, username already exists: {data.username}")
            raise DuplicatedUsernameError("Username already exists")

        # Self-registration always yields a regular user
        user = users.add(_build_user(data, role="User", confirmed=False))
        logger.info(f"User registered: {user.email}")

        AuthService._issue_otp(db, user, data.otp_channel, sender_factory)
        _invalidate("user", user.id)

        logger.info(f"Registration completed for {user.email}")
        return UserReadDTO.model_validate(user)

    @staticmethod
    @with_db
    def send_otp(db: Session, email: str, sender_factory: OtpSenderFactory,
                 channel: OtpChannel = OtpChannel.EMAIL) -> bool:
        """Store and send a fresh OTP (password reset)."""
        logger.info(f"Send OTP request received for {email}")
        user = UserRepository(db).get_by_email(email)
        if user is None:
            logger.warning(f"OTP requested for unknown email: {email}")
            raise NotFoundError("User not found")

        AuthService._issue_otp(db, user, channel, sender_factory)
        return True

    @staticmethod
    @with_db
    def verify_otp(db: Session, email: str, code: str) -> bool:
        """Confirm the email address of the user owning the OTP."""
        logger.info(f"Verify OTP request received for {email}")
        record = AuthService._consume_checked_otp(db, email, code)

        users = UserRepository(db)
        user = users.get_by_email(email)
        if user is None:
            logger.warning(f"OTP verification for unknown user: {email}")
            raise NotFoundError("User not found")

        user.is_email_confirmed = True
        user.last_updated = utcnow()
        users.update(user)
        logger.info(f"Email confirmed: {email}")

        OtpRepository(db).delete(record)
        _invalidate("user", user.id)
        return True

    @staticmethod
    @with_db
    def reset_password(db: Session, data: ResetPasswordRequest) -> bool:
        logger.info(f"Reset password request received for {data.email}")
        record = AuthService._consume_checked_otp(db, data.email, data.otp)

        users = UserRepository(db)
        user = users.get_by_email(data.email)
        if user is None:
            logger.warning(f"Password reset for unknown user: {data.email}")
            raise NotFoundError("User not found")

        user.password = hash_password(data.new_password)
        user.last_updated = utcnow()
        users.update(user)
        logger.info(f"Password reset successfully for {data.email}")

        OtpRepository(db).delete(record)
        _invalidate("user", user.id)
        return True

    @staticmethod
    def _issue_otp(db: Session, user: User, channel, sender_factory: OtpSenderFactory) -> None:
        channel = OtpChannel(channel)
        record = OtpRecord(
            user_id=user.id,
            email=user.email,
            code=generate_otp(),
            expiration=utcnow() + timedelta(minutes=settings.otp_expiration_minutes),
        )
        OtpRepository(db).add(record)
        logger.info(f"OTP saved for {user.email}")

        recipient = user.phone_number if channel == OtpChannel.WHATSAPP else user.email
        if not recipient:
            raise ValidationAppError(f"No {channel.value} recipient on file for this user")
        sender_factory.create(channel).send_otp(recipient, record.code)
        logger.info(f"OTP sent to {user.email} via {channel.value}")

    @staticmethod
    def _consume_checked_otp(db: Session, email: str, code: str) -> OtpRecord:
        """Latest OTP for email+code; expired records are deleted before raising."""
        otps = OtpRepository(db)
        record = otps.get_latest(email, code)
        if record is None:
            logger.warning(f"Invalid OTP attempt for {email}")
            raise InvalidOtpError("Invalid or expired OTP code")

        if record.expiration < utcnow():
            logger.warning(f"Expired OTP used for {email}")
            otps.delete(record)
            raise ExpiredOtpError("OTP code has expired")
        return record


def _build_user(data: UserWriteDTO, role: str, confirmed: bool) -> User:
    return User(
        username=data.username,
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password=hash_password(data.password),
        phone_number=data.phone_number,
        date_of_birth=data.date_of_birth,
        address1=data.address1,
        address2=data.address2,
        city=data.city,
        country=data.country,
        driver_license=data.driver_license,
        role=role,
        is_email_confirmed=confirmed,
    )


# ==========================================
# USERS (ADMIN)
# ==========================================

class AdminService:
    """User management for administrators."""

    @staticmethod
    @with_db
    def create_user(db: Session, data: UserWriteDTO) -> UserReadDTO:
        """Admin-created accounts are confirmed immediately."""
        logger.info(f"Create user request received: {data.email}")
        users = UserRepository(db)
        if users.email_exists(data.email):
            logger.warning(f"Create user rejected, email already exists: {data.email}")
            raise DuplicatedEmailError("Email already exists")
        if users.username_exists(data.username):
            logger.warning(f"Create user rejected, username already exists: {data.username}")
            raise DuplicatedUsernameError("Username already exists")

        user = users.add(_build_user(data, role=data.role, confirmed=True))
        _invalidate("user", user.id)
        logger.info(f"User created: {user.id}")
        return UserReadDTO.model_validate(user)

    @staticmethod
    @with_db
    def get_users(db: Session) -> List[UserReadDTO]:
        cached = cache.get(_list_key("user"))
        if cached is not None:
            logger.debug("Returning users from cache")
            return cached

        users = [UserReadDTO.model_validate(u) for u in UserRepository(db).get_all()]
        logger.info(f"Fetched {len(users)} users from repository")
        return _cache_store(_list_key("user"), users, settings.users_cache_minutes)

    @staticmethod
    @with_db
    def get_user(db: Session, user_id: int) -> Optional[UserReadDTO]:
        key = _item_key("user", user_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning user {user_id} from cache")
            return cached

        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            return None
        return _cache_store(key, UserReadDTO.model_validate(user), settings.users_cache_minutes)

    @staticmethod
    @with_db
    def update_user(db: Session, user_id: int, data: UserPatchDTO) -> Optional[UserReadDTO]:
        logger.info(f"Update user request received: {user_id}")
        users = UserRepository(db)
        user = users.get_by_id(user_id)
        if user is None:
            return None

        changes = data.model_dump(exclude={"confirm_password"})
        if data.email and data.email.lower() != user.email.lower() and users.email_exists(data.email):
            raise DuplicatedEmailError("Email already exists")
        if data.username and data.username != user.username and users.username_exists(data.username):
            raise DuplicatedUsernameError("Username already exists")
        if data.password is not None:
            changes["password"] = hash_password(data.password)

        user = users.apply_patch(user, changes)
        _invalidate("user", user_id)
        logger.info(f"User updated: {user_id}")
        return UserReadDTO.model_validate(user)

    @staticmethod
    @with_db
    def delete_user(db: Session, user_id: int) -> None:
        logger.info(f"Delete user request received: {user_id}")
        users = UserRepository(db)
        user = users.get_by_id(user_id)
        if user is None:
            return

        users.delete(user)
        _invalidate("user", user_id, "booking", "review")
        logger.info(f"User deleted: {user_id}")


# ==========================================
# CITIES
# ==========================================

class CityService:

    @staticmethod
    @with_db
    def create_city(db: Session, data: CityWriteDTO) -> CityReadDTO:
        logger.info("Create city request received")
        city = CityRepository(db).add(City(**data.model_dump()))
        _invalidate("city", city.id)
        logger.info(f"City created: {city.id}")
        return CityReadDTO.model_validate(city)

    @staticmethod
    @with_db
    def get_cities(db: Session) -> List[CityReadDTO]:
        cached = cache.get(_list_key("city"))
        if cached is not None:
            logger.debug("Returning cities from cache")
            return cached

        cities = [CityReadDTO.model_validate(c) for c in CityRepository(db).get_all()]
        logger.info(f"Fetched {len(cities)} cities from repository")
        return _cache_store(_list_key("city"), cities, settings.cities_cache_minutes)

    @staticmethod
    @with_db
    def get_city(db: Session, city_id: int) -> Optional[CityReadDTO]:
        key = _item_key("city", city_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning city {city_id} from cache")
            return cached

        city = CityRepository(db).get_by_id(city_id)
        if city is None:
            return None
        return _cache_store(key, CityReadDTO.model_validate(city), settings.cities_cache_minutes)

    @staticmethod
    @with_db
    def update_city(db: Session, city_id: int, data: CityPatchDTO) -> Optional[CityReadDTO]:
        logger.info(f"Update city request received: {city_id}")
        cities = CityRepository(db)
        city = cities.get_by_id(city_id)
        if city is None:
            return None

        changes = data.model_dump()
        changes["updated_at"] = utcnow()
        city = cities.apply_patch(city, changes)
        _invalidate("city", city_id)
        logger.info(f"City updated: {city_id}")
        return CityReadDTO.model_validate(city)

    @staticmethod
    @with_db
    def delete_city(db: Session, city_id: int) -> None:
        logger.info(f"Delete city request received: {city_id}")
        cities = CityRepository(db)
        city = cities.get_by_id(city_id)
        if city is None:
            return

        cities.delete(city)
        _invalidate("city", city_id, "hotel", "room", "review", "booking")
        logger.info(f"City deleted: {city_id}")


# ==========================================
# HOTELS
# ==========================================

class HotelService:

    @staticmethod
    @with_db
    def create_hotel(db: Session, data: HotelWriteDTO) -> HotelReadDTO:
        """Create a hotel and announce it to subscribed users."""
        logger.info("Create hotel request received")
        if not CityRepository(db).exists(data.city_id):
            logger.warning(f"Create hotel rejected, city {data.city_id} not found")
            raise ValidationAppError("City not found", {"city_id": data.city_id})

        hotel = HotelRepository(db).add(Hotel(**data.model_dump()))
        _invalidate("hotel", hotel.id)
        logger.info(f"Hotel created: {hotel.id}")

        hotel_publisher.notify_observers(db, hotel)
        return HotelReadDTO.model_validate(hotel)

    @staticmethod
    @with_db
    def get_hotels(db: Session) -> List[HotelReadDTO]:
        cached = cache.get(_list_key("hotel"))
        if cached is not None:
            logger.debug("Returning hotels from cache")
            return cached

        hotels = [HotelReadDTO.model_validate(h) for h in HotelRepository(db).get_all()]
        logger.info(f"Fetched {len(hotels)} hotels from repository")
        return _cache_store(_list_key("hotel"), hotels, settings.hotels_cache_minutes)

    @staticmethod
    @with_db
    def get_hotel(db: Session, hotel_id: int) -> Optional[HotelReadDTO]:
        key = _item_key("hotel", hotel_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning hotel {hotel_id} from cache")
            return cached

        hotel = HotelRepository(db).get_by_id(hotel_id)
        if hotel is None:
            return None
        return _cache_store(key, HotelReadDTO.model_validate(hotel), settings.hotels_cache_minutes)

    @staticmethod
    @with_db
    def update_hotel(db: Session, hotel_id: int, data: HotelPatchDTO) -> Optional[HotelReadDTO]:
        logger.info(f"Update hotel request received: {hotel_id}")
        hotels = HotelRepository(db)
        hotel = hotels.get_by_id(hotel_id)
        if hotel is None:
            return None
        if data.city_id is not None and not CityRepository(db).exists(data.city_id):
            raise ValidationAppError("City not found", {"city_id": data.city_id})

        hotel = hotels.apply_patch(hotel, data.model_dump())
        _invalidate("hotel", hotel_id)
        logger.info(f"Hotel updated: {hotel_id}")
        return HotelReadDTO.model_validate(hotel)

    @staticmethod
    @with_db
    def delete_hotel(db: Session, hotel_id: int) -> None:
        logger.info(f"Delete hotel request received: {hotel_id}")
        hotels = HotelRepository(db)
        hotel = hotels.get_by_id(hotel_id)
        if hotel is None:
            return

        hotels.delete(hotel)
        _invalidate("hotel", hotel_id, "room", "review", "booking")
        logger.info(f"Hotel deleted: {hotel_id}")


# ==========================================
# ROOMS
# ==========================================

class RoomService:

    @staticmethod
    @with_db
    def create_room(db: Session, data: RoomWriteDTO) -> RoomReadDTO:
        logger.info("Create room request received")
        if not HotelRepository(db).exists(data.hotel_id):
            logger.warning(f"Create room rejected, hotel {data.hotel_id} not found")
            raise ValidationAppError("Hotel not found", {"hotel_id": data.hotel_id})

        values = data.model_dump()
        values["room_type"] = data.room_type.value
        room = RoomRepository(db).add(Room(**values))
        _invalidate("room", room.id)
        logger.info(f"Room created: {room.id}")
        return RoomReadDTO.model_validate(room)

    @staticmethod
    @with_db
    def get_rooms(db: Session, query: Optional[RoomQueryDTO] = None) -> List[RoomReadDTO]:
        """All rooms, or the rooms matching ``query``. Filtered results are not cached."""
        rooms = RoomRepository(db)
        if query is not None and not query.is_empty():
            logger.info(f"Filtering rooms: {query.model_dump(exclude_none=True)}")
            return [RoomReadDTO.model_validate(r) for r in rooms.filter(query)]

        cached = cache.get(_list_key("room"))
        if cached is not None:
            logger.debug("Returning rooms from cache")
            return cached

        result = [RoomReadDTO.model_validate(r) for r in rooms.get_all()]
        logger.info(f"Fetched {len(result)} rooms from repository")
        return _cache_store(_list_key("room"), result, settings.rooms_cache_minutes)

    @staticmethod
    @with_db
    def get_room(db: Session, room_id: int) -> Optional[RoomReadDTO]:
        key = _item_key("room", room_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning room {room_id} from cache")
            return cached

        room = RoomRepository(db).get_by_id(room_id)
        if room is None:
            return None
        return _cache_store(key, RoomReadDTO.model_validate(room), settings.rooms_cache_minutes)

    @staticmethod
    @with_db
    def update_room(db: Session, room_id: int, data: RoomPatchDTO) -> Optional[RoomReadDTO]:
        logger.info(f"Update room request received: {room_id}")
        rooms = RoomRepository(db)
        room = rooms.get_by_id(room_id)
        if room is None:
            return None
        if data.hotel_id is not None and not HotelRepository(db).exists(data.hotel_id):
            raise ValidationAppError("Hotel not found", {"hotel_id": data.hotel_id})

        changes = data.model_dump()
        if data.room_type is not None:
            changes["room_type"] = data.room_type.value
        changes["updated_at"] = utcnow()
        room = rooms.apply_patch(room, changes)
        _invalidate("room", room_id)
        logger.info(f"Room updated: {room_id}")
        return RoomReadDTO.model_validate(room)

    @staticmethod
    @with_db
    def delete_room(db: Session, room_id: int) -> None:
        logger.info(f"Delete room request received: {room_id}")
        rooms = RoomRepository(db)
        room = rooms.get_by_id(room_id)
        if room is None:
            return

        rooms.delete(room)
        _invalidate("room", room_id, "booking")
        logger.info(f"Room deleted: {room_id}")


# ==========================================
# BOOKINGS
# ==========================================

class BookingService:

    @staticmethod
    @with_db
    def create_booking(db: Session, data: BookingWriteDTO) -> BookingReadDTO:
        """
        Create a booking, filling defaults.

        - check_in_date: now
        - check_out_date: one night after check-in
        - total_price: nights x price per night
        """
        logger.info("Create booking request received")
        if not UserRepository(db).exists(data.user_id):
            logger.warning(f"Create booking rejected, user {data.user_id} not found")
            raise ValidationAppError("User not found", {"user_id": data.user_id})
        room = RoomRepository(db).get_by_id(data.room_id)
        if room is None:
            logger.warning(f"Create booking rejected, room {data.room_id} not found")
            raise ValidationAppError("Room not found", {"room_id": data.room_id})

        check_in = data.check_in_date or utcnow()
        check_out = data.check_out_date or check_in + timedelta(days=1)
        if check_out <= check_in:
            raise ValidationAppError("Check-out date must be after check-in date")

        total_price = data.total_price
        if total_price is None:
            nights = max(1, (check_out.date() - check_in.date()).days)
            total_price = nights * room.price_per_night

        booking = BookingRepository(db).add(Booking(
            user_id=data.user_id,
            room_id=data.room_id,
            check_in_date=check_in,
            check_out_date=check_out,
            total_price=total_price,
        ))
        _invalidate("booking", booking.id)
        logger.info(f"Booking created: {booking.id}")
        return BookingReadDTO.model_validate(booking)

    @staticmethod
    @with_db
    def get_bookings(db: Session) -> List[BookingReadDTO]:
        cached = cache.get(_list_key("booking"))
        if cached is not None:
            logger.debug("Returning bookings from cache")
            return cached

        bookings = [BookingReadDTO.model_validate(b) for b in BookingRepository(db).get_all()]
        logger.info(f"Fetched {len(bookings)} bookings from repository")
        return _cache_store(_list_key("booking"), bookings, settings.bookings_cache_minutes)

    @staticmethod
    @with_db
    def get_booking(db: Session, booking_id: int) -> Optional[BookingReadDTO]:
        key = _item_key("booking", booking_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning booking {booking_id} from cache")
            return cached

        booking = BookingRepository(db).get_by_id(booking_id)
        if booking is None:
            return None
        return _cache_store(key, BookingReadDTO.model_validate(booking), settings.bookings_cache_minutes)

    @staticmethod
    @with_db
    def update_booking(db: Session, booking_id: int, data: BookingPatchDTO) -> Optional[BookingReadDTO]:
        logger.info(f"Update booking request received: {booking_id}")
        bookings = BookingRepository(db)
        booking = bookings.get_by_id(booking_id)
        if booking is None:
            return None
        if data.room_id is not None and not RoomRepository(db).exists(data.room_id):
            raise ValidationAppError("Room not found", {"room_id": data.room_id})

        check_in = data.check_in_date or booking.check_in_date
        check_out = data.check_out_date or booking.check_out_date
        if check_out <= check_in:
            raise ValidationAppError("Check-out date must be after check-in date")

        booking = bookings.apply_patch(booking, data.model_dump())
        _invalidate("booking", booking_id)
        logger.info(f"Booking updated: {booking_id}")
        return BookingReadDTO.model_validate(booking)

    @staticmethod
    @with_db
    def delete_booking(db: Session, booking_id: int) -> None:
        logger.info(f"Delete booking request received: {booking_id}")
        bookings = BookingRepository(db)
        booking = bookings.get_by_id(booking_id)
        if booking is None:
            return

        bookings.delete(booking)
        _invalidate("booking", booking_id)
        logger.info(f"Booking deleted: {booking_id}")


# ==========================================
# REVIEWS
# ==========================================

class ReviewService:

    @staticmethod
    @with_db
    def create_review(db: Session, data: ReviewWriteDTO) -> ReviewReadDTO:
        logger.info("Create review request received")
        if not UserRepository(db).exists(data.user_id):
            logger.warning(f"Create review rejected, user {data.user_id} not found")
            raise ValidationAppError("User not found", {"user_id": data.user_id})
        if not HotelRepository(db).exists(data.hotel_id):
            logger.warning(f"Create review rejected, hotel {data.hotel_id} not found")
            raise ValidationAppError("Hotel not found", {"hotel_id": data.hotel_id})

        review = ReviewRepository(db).add(Review(**data.model_dump()))
        _invalidate("review", review.id)
        logger.info(f"Review created: {review.id}")
        return ReviewReadDTO.model_validate(review)

    @staticmethod
    @with_db
    def get_reviews(db: Session) -> List[ReviewReadDTO]:
        cached = cache.get(_list_key("review"))
        if cached is not None:
            logger.debug("Returning reviews from cache")
            return cached

        reviews = [ReviewReadDTO.model_validate(r) for r in ReviewRepository(db).get_all()]
        logger.info(f"Fetched {len(reviews)} reviews from repository")
        return _cache_store(_list_key("review"), reviews, settings.reviews_cache_minutes)

    @staticmethod
    @with_db
    def get_review(db: Session, review_id: int) -> Optional[ReviewReadDTO]:
        key = _item_key("review", review_id)
        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"Returning review {review_id} from cache")
            return cached

        review = ReviewRepository(db).get_by_id(review_id)
        if review is None:
            return None
        return _cache_store(key, ReviewReadDTO.model_validate(review), settings.reviews_cache_minutes)

    @staticmethod
    @with_db
    def update_review(db: Session, review_id: int, data: ReviewPatchDTO) -> Optional[ReviewReadDTO]:
        logger.info(f"Update review request received: {review_id}")
        reviews = ReviewRepository(db)
        review = reviews.get_by_id(review_id)
        if review is None:
            return None

        review = reviews.apply_patch(review, data.model_dump())
        _invalidate("review", review_id)
        logger.info(f"Review updated: {review_id}")
        return ReviewReadDTO.model_validate(review)

    @staticmethod
    @with_db
    def delete_review(db: Session, review_id: int) -> None:
        logger.info(f"Delete review request received: {review_id}")
        reviews = ReviewRepository(db)
        review = reviews.get_by_id(review_id)
        if review is None:
            return

        reviews.delete(review)
        _invalidate("review", review_id)
        logger.info(f"Review deleted: {review_id}")
