# Tests for booking defaults, validation and role restrictions.

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from tests.support import create_city, create_hotel, create_room


@pytest.fixture
def room(client, admin_headers):
    city = create_city(client, admin_headers)
    hotel = create_hotel(client, admin_headers, city["id"])
    return create_room(client, admin_headers, hotel["id"], price_per_night=120)


def _book(client, headers, **payload):
    return client.post("/api/v1/bookings", headers=headers, json=payload)


def test_booking_defaults_to_one_night(client, user_headers, regular_user, room) -> None:
    response = _book(client, user_headers, user_id=regular_user.id, room_id=room["id"])
    assert response.status_code == 201

    booking = response.json()
    check_in = datetime.fromisoformat(booking["check_in_date"])
    check_out = datetime.fromisoformat(booking["check_out_date"])
    assert check_out - check_in == timedelta(days=1)
    assert booking["total_price"] == 120
    assert response.headers["location"].endswith(f"/api/v1/bookings/{booking['id']}")


def test_total_price_is_nights_times_rate(client, user_headers, regular_user, room) -> None:
    response = _book(
        client, user_headers,
        user_id=regular_user.id,
        room_id=room["id"],
        check_in_date="2030-01-10T14:00:00",
        check_out_date="2030-01-13T11:00:00",
    )
    assert response.status_code == 201
    assert response.json()["total_price"] == 360


def test_explicit_total_price_is_kept(client, user_headers, regular_user, room) -> None:
    response = _book(client, user_headers, user_id=regular_user.id, room_id=room["id"], total_price=99.0)
    assert response.json()["total_price"] == 99


def test_check_out_must_follow_check_in(client, user_headers, regular_user, room) -> None:
    response = _book(
        client, user_headers,
        user_id=regular_user.id,
        room_id=room["id"],
        check_in_date="2030-01-10T14:00:00",
        check_out_date="2030-01-09T11:00:00",
    )
    assert response.status_code == 400


def test_booking_requires_existing_user_and_room(client, user_headers, regular_user, room) -> None:
    assert _book(client, user_headers, user_id=regular_user.id, room_id=999).status_code == 400
    assert _book(client, user_headers, user_id=999, room_id=room["id"]).status_code == 400


def test_listing_is_admin_only(client, user_headers, admin_headers, regular_user, room) -> None:
    _book(client, user_headers, user_id=regular_user.id, room_id=room["id"])

    assert client.get("/api/v1/bookings", headers=user_headers).status_code == 403
    listing = client.get("/api/v1/bookings", headers=admin_headers)
    assert listing.status_code == 200
    assert len(listing.json()) == 1
    assert "etag" in listing.headers


def test_user_can_read_booking_but_not_change_it(client, user_headers, admin_headers, regular_user, room) -> None:
    booking = _book(client, user_headers, user_id=regular_user.id, room_id=room["id"]).json()
    url = f"/api/v1/bookings/{booking['id']}"

    fetched = client.get(url, headers=user_headers)
    assert fetched.status_code == 200
    etag = fetched.headers["etag"]

    assert client.patch(url, headers={**user_headers, "If-Match": etag}, json={"total_price": 10}).status_code == 403
    assert client.delete(url, headers=user_headers).status_code == 403

    updated = client.patch(url, headers={**admin_headers, "If-Match": etag}, json={"total_price": 150})
    assert updated.status_code == 200
    assert updated.json()["total_price"] == 150

    assert client.delete(url, headers=admin_headers).status_code == 204
    assert client.get(url, headers=user_headers).status_code == 404


def test_patch_rejects_inverted_dates(client, user_headers, admin_headers, regular_user, room) -> None:
    booking = _book(
        client, user_headers,
        user_id=regular_user.id,
        room_id=room["id"],
        check_in_date="2030-01-10T14:00:00",
        check_out_date="2030-01-12T11:00:00",
    ).json()
    url = f"/api/v1/bookings/{booking['id']}"
    etag = client.get(url, headers=admin_headers).headers["etag"]

    response = client.patch(url, headers={**admin_headers, "If-Match": etag},
                            json={"check_out_date": "2030-01-09T11:00:00"})
    assert response.status_code == 400


def test_deleting_room_clears_cached_bookings(client, user_headers, admin_headers, regular_user, room) -> None:
    booking = _book(client, user_headers, user_id=regular_user.id, room_id=room["id"]).json()
    assert len(client.get("/api/v1/bookings", headers=admin_headers).json()) == 1
    assert client.get(f"/api/v1/bookings/{booking['id']}", headers=user_headers).status_code == 200

    assert client.delete(f"/api/v1/rooms/{room['id']}", headers=admin_headers).status_code == 204

    assert client.get("/api/v1/bookings", headers=admin_headers).json() == []
    assert client.get(f"/api/v1/bookings/{booking['id']}", headers=user_headers).status_code == 404


def test_item_if_none_match(client, user_headers, regular_user, room) -> None:
    booking = _book(client, user_headers, user_id=regular_user.id, room_id=room["id"]).json()
    url = f"/api/v1/bookings/{booking['id']}"

    etag = client.get(url, headers=user_headers).headers["etag"]
    assert client.get(url, headers={**user_headers, "If-None-Match": etag}).status_code == 304
