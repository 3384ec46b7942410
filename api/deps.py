"""
Travel Booking API - Dependency Injection
==========================================

Provides the FastAPI dependencies shared by every router:
- get_db: request-scoped SQLAlchemy session
- get_current_user: validated JWT payload (rejects revoked tokens)
- require_roles: role-based access control factory
- get_otp_sender_factory: OTP delivery strategies (overridden in tests)
"""

from typing import Any, Callable, Dict, Generator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import SessionLocal
from exceptions import ForbiddenError, InvalidCredentialsError
from logging_config import get_logger
from notifications import OtpSenderFactory
from security import decode_access_token
from services import TokenBlacklistService

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    The @with_db decorator in services.py detects this injected session
    and uses it instead of creating its own.

    Usage:
        @router.post("")
        def create_item(db: Session = Depends(get_db)):
            return SomeService.some_method(db, ...)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Decode the bearer token and make sure it has not been revoked.

    Returns:
        The token claims (sub, jti, role, user_id, exp, ...).
    """
    if credentials is None:
        raise InvalidCredentialsError("Not authenticated")

    payload = decode_access_token(credentials.credentials)

    if TokenBlacklistService.is_token_blacklisted(db, payload["jti"]):
        logger.warning(f"Blacklisted token used: {payload['jti']}")
        raise InvalidCredentialsError("Token is blacklisted")

    return payload


def require_roles(*roles: str) -> Callable[..., Dict[str, Any]]:
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        @router.delete("/{id}", dependencies=[Depends(require_roles("Admin"))])
    """

    def _role_dependency(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if current_user.get("role") not in roles:
            logger.warning(f"Forbidden: role {current_user.get('role')} not in {roles}")
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return _role_dependency


def get_otp_sender_factory() -> OtpSenderFactory:
    return OtpSenderFactory()
