"""
Travel Booking API - Security Helpers
======================================

Password hashing (PBKDF2-HMAC-SHA256), JWT issuing/validation with PyJWT
and one-time passcode generation.

Every issued token carries a ``jti`` claim so it can be revoked through the
token blacklist (see ``services.TokenBlacklistService``).
"""

import hashlib
import hmac
import os
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from config import settings
from exceptions import InvalidCredentialsError
from logging_config import get_logger

logger = get_logger(__name__)

PBKDF2_ITERATIONS = 100_000


# ==========================================
# PASSWORDS
# ==========================================

def hash_password(password: str) -> str:
    """
    Hash a password with a random 16-byte salt.

    Returns:
        ``salthex$hashhex``
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored ``salthex$hashhex`` value."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        logger.warning("Stored password hash has an invalid format")
        return False

    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


# ==========================================
# JWT
# ==========================================

@dataclass
class TokenResult:
    """Issued access token with the data needed to revoke it later."""
    token: str
    jti: str
    expires_at: datetime  # naive UTC


def create_access_token(subject: str, role: str, user_id: int) -> TokenResult:
    """
    Issue a signed access token.

    Args:
        subject: User email (``sub`` claim).
        role: "User" or "Admin".
        user_id: Primary key of the user.

    Returns:
        TokenResult with the encoded token, its jti and expiration.
    """
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.jwt_expires_in_minutes)
    jti = str(uuid.uuid4())

    payload = {
        "sub": subject,
        "jti": jti,
        "role": role,
        "user_id": user_id,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return TokenResult(token=token, jti=jti, expires_at=expires_at.replace(tzinfo=None))


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Validate signature, issuer, audience and expiry of a token.

    Raises:
        InvalidCredentialsError: if the token cannot be trusted.
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "jti", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidCredentialsError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected token: {e}")
        raise InvalidCredentialsError("Invalid token")


# ==========================================
# OTP
# ==========================================

def generate_otp(length: int = settings.otp_length) -> str:
    """Numeric one-time passcode."""
    return "".join(secrets.choice("0123456789") for _ in range(length))
