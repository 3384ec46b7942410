# Shared fixtures for the API and service tests.
# Every test runs against a fresh in-memory SQLite schema and an empty cache.
# OTP delivery is replaced by a recording sender so codes can be read back.

from __future__ import annotations

import os

# Must be set before any application module reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes!"
for _name in ("SMTP_SERVER", "WHATSAPP_INSTANCE_ID", "WHATSAPP_TOKEN", "ADMIN_EMAIL", "ADMIN_PASSWORD"):
    os.environ[_name] = ""

from typing import Dict, Iterator, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from api.deps import get_otp_sender_factory
from api.main import app
from cache import cache
from database import Base, SessionLocal, User, engine
from notifications import OtpChannel, OtpSenderFactory
from tests.support import RecordingOtpSender, bearer, make_user


@pytest.fixture(autouse=True)
def reset_state() -> Iterator[None]:
    Base.metadata.create_all(engine)
    cache.clear()
    yield
    Base.metadata.drop_all(engine)
    cache.clear()


@pytest.fixture
def db_session() -> Iterator[Session]:
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def otp_outbox() -> List[Tuple[str, str, str]]:
    return []


@pytest.fixture
def client(otp_outbox) -> Iterator[TestClient]:
    factory = OtpSenderFactory(
        email_sender=RecordingOtpSender(OtpChannel.EMAIL, otp_outbox),
        whatsapp_sender=RecordingOtpSender(OtpChannel.WHATSAPP, otp_outbox),
    )
    app.dependency_overrides[get_otp_sender_factory] = lambda: factory

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session) -> User:
    return make_user(
        db_session,
        username="admin",
        first_name="Ada",
        last_name="Admin",
        email="admin@example.com",
        role="Admin",
    )


@pytest.fixture
def regular_user(db_session) -> User:
    return make_user(db_session)


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def user_headers(regular_user) -> Dict[str, str]:
    return bearer(regular_user)
