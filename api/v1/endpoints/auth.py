"""
Travel Booking API - Authentication Endpoints
==============================================

Login, registration with OTP email verification, password reset and logout
(token revocation).
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_otp_sender_factory, require_roles
from logging_config import get_logger
from notifications import OtpSenderFactory
from schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    UserReadDTO,
    UserRegisterDTO,
    VerifyOtpRequest,
)
from services import AuthService, TokenBlacklistService

logger = get_logger(__name__)

router = APIRouter()


# ==========================================
# ENDPOINTS
# ==========================================

@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User Login",
    description="Authenticate with email or username and password. Returns a JWT bearer token."
)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    return AuthService.login(db, credentials)


@router.post(
    "/register",
    response_model=UserReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account. A one-time passcode is sent to confirm the email address."
)
def register(
    data: UserRegisterDTO,
    db: Session = Depends(get_db),
    sender_factory: OtpSenderFactory = Depends(get_otp_sender_factory),
):
    return AuthService.register(db, data, sender_factory)


@router.post(
    "/verify-otp",
    response_model=MessageResponse,
    summary="Verify Email",
    description="Confirm the email address with the OTP received after registration."
)
def verify_otp(data: VerifyOtpRequest, db: Session = Depends(get_db)):
    AuthService.verify_otp(db, data.email, data.otp)
    return MessageResponse(message="Email confirmed successfully")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    summary="Request Password Reset",
    description="Send a password reset OTP to the given email (or its phone via WhatsApp)."
)
def forgot_password(
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    sender_factory: OtpSenderFactory = Depends(get_otp_sender_factory),
):
    AuthService.send_otp(db, data.email, sender_factory, data.channel)
    return MessageResponse(message="OTP sent successfully")


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset Password",
    description="Set a new password using a valid OTP."
)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    AuthService.reset_password(db, data)
    return MessageResponse(message="Password reset successfully")


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Revoke the current bearer token until it expires."
)
def logout(
    current_user: Dict[str, Any] = Depends(require_roles("User", "Admin")),
    db: Session = Depends(get_db),
):
    expiration = datetime.fromtimestamp(current_user["exp"], tz=timezone.utc).replace(tzinfo=None)
    TokenBlacklistService.add_token_to_blacklist(db, current_user["jti"], expiration)
    logger.info(f"User {current_user.get('user_id')} logged out")
    return MessageResponse(message="Logged out successfully")
