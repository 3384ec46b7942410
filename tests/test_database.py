# Tests for schema bootstrap, the seeded administrator and per-request sessions.

from __future__ import annotations

from api.deps import get_db
from config import settings
from database import User, engine, init_db
from security import verify_password


def test_init_db_without_admin_settings_seeds_nothing(db_session) -> None:
    init_db(engine)
    assert db_session.query(User).count() == 0


def test_init_db_seeds_admin_once(monkeypatch, db_session) -> None:
    monkeypatch.setattr(settings, "admin_email", "root@example.com")
    monkeypatch.setattr(settings, "admin_password", "Bootstrap123")

    init_db(engine)
    init_db(engine)

    admins = db_session.query(User).filter(User.email == "root@example.com").all()
    assert len(admins) == 1
    assert admins[0].role == "Admin"
    assert admins[0].is_email_confirmed is True
    assert verify_password("Bootstrap123", admins[0].password)


def test_seeded_admin_can_log_in(monkeypatch, client) -> None:
    monkeypatch.setattr(settings, "admin_email", "root@example.com")
    monkeypatch.setattr(settings, "admin_password", "Bootstrap123")
    init_db(engine)

    response = client.post("/api/v1/auth/login", json={"username": "admin", "password": "Bootstrap123"})
    assert response.status_code == 200


def test_get_db_gives_each_caller_its_own_session() -> None:
    first, second = get_db(), get_db()
    try:
        assert next(first) is not next(second)
    finally:
        first.close()
        second.close()
