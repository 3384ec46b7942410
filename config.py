"""
Travel Booking API - Centralized Configuration
===============================================

All settings are read from environment variables (a local ``.env`` file is
loaded first with python-dotenv). Defaults are suitable for local development
with SQLite.

Usage:
    from config import settings
    settings.database_url
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Travel Accommodation Booking API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///travel_booking.db")

    # JWT
    secret_key: str = os.getenv("SECRET_KEY", "change-me-in-production-please-32b")
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = os.getenv("JWT_ISSUER", "travel-booking-api")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "travel-booking-clients")
    jwt_expires_in_minutes: int = int(os.getenv("JWT_EXPIRES_IN_MINUTES", "60"))

    # OTP
    otp_expiration_minutes: int = int(os.getenv("OTP_EXPIRATION_MINUTES", "5"))
    otp_length: int = int(os.getenv("OTP_LENGTH", "6"))

    # Cache lifetimes (minutes)
    users_cache_minutes: int = 20
    rooms_cache_minutes: int = 20
    hotels_cache_minutes: int = 40
    cities_cache_minutes: int = 60
    reviews_cache_minutes: int = 60
    bookings_cache_minutes: int = 20
    sliding_expiration_minutes: int = 60

    # SMTP (email OTP and hotel announcements)
    smtp_server: str = os.getenv("SMTP_SERVER", "")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_username: str = os.getenv("SMTP_USERNAME", "")
    app_password: str = os.getenv("APP_PASSWORD", "")
    sender_name: str = os.getenv("SENDER_NAME", "Travel Booking Platform")
    sender_email: str = os.getenv("SENDER_EMAIL", "")

    # WhatsApp gateway (OTP)
    whatsapp_api_url: str = os.getenv("WHATSAPP_API_URL", "https://api.ultramsg.com")
    whatsapp_instance_id: str = os.getenv("WHATSAPP_INSTANCE_ID", "")
    whatsapp_token: str = os.getenv("WHATSAPP_TOKEN", "")

    # HTTP
    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        )
    )

    # Logging
    log_path: str = os.getenv("LOG_PATH", "")

    # Bootstrap administrator, seeded by init_db() when set
    admin_email: str = os.getenv("ADMIN_EMAIL", "")
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str = os.getenv("ADMIN_PASSWORD", "")

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_server and self.smtp_username and self.app_password and self.sender_email)

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.whatsapp_instance_id and self.whatsapp_token)


settings = Settings()
