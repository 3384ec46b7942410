# Tests for administrator user management.

from __future__ import annotations

from tests.support import create_city, create_hotel, create_room

NEW_USER = {
    "username": "layla",
    "first_name": "Layla",
    "last_name": "Nasser",
    "email": "layla@example.com",
    "password": "Welcome123",
    "confirm_password": "Welcome123",
    "phone_number": "(059) 555-0101",
    "role": "Admin",
}


def test_admin_created_user_is_confirmed(client, admin_headers) -> None:
    response = client.post("/api/v1/admin/users", headers=admin_headers, json=NEW_USER)
    assert response.status_code == 201
    user = response.json()
    assert user["is_email_confirmed"] is True
    assert user["role"] == "Admin"
    assert response.headers["location"].endswith(f"/api/v1/admin/users/{user['id']}")

    login = client.post("/api/v1/auth/login", json={"email": "layla@example.com", "password": "Welcome123"})
    assert login.status_code == 200


def test_duplicate_email_conflict(client, admin_headers, regular_user) -> None:
    response = client.post("/api/v1/admin/users", headers=admin_headers,
                           json={**NEW_USER, "email": regular_user.email})
    assert response.status_code == 409


def test_regular_user_is_forbidden(client, user_headers) -> None:
    assert client.get("/api/v1/admin/users", headers=user_headers).status_code == 403


def test_list_users_with_etag(client, admin_headers, regular_user) -> None:
    response = client.get("/api/v1/admin/users", headers=admin_headers)
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"admin@example.com", regular_user.email}

    etag = response.headers["etag"]
    again = client.get("/api/v1/admin/users", headers={**admin_headers, "If-None-Match": etag})
    assert again.status_code == 304


def test_patch_user_with_if_match(client, admin_headers, regular_user) -> None:
    url = f"/api/v1/admin/users/{regular_user.id}"
    etag = client.get(url, headers=admin_headers).headers["etag"]

    response = client.patch(url, headers={**admin_headers, "If-Match": etag},
                            json={"first_name": "Tamara", "country": "Jordan"})
    assert response.status_code == 200
    assert response.json()["first_name"] == "Tamara"
    assert response.json()["email"] == regular_user.email

    stale = client.patch(url, headers={**admin_headers, "If-Match": etag}, json={"first_name": "Tina"})
    assert stale.status_code == 412


def test_patch_password_requires_confirmation(client, admin_headers, regular_user) -> None:
    url = f"/api/v1/admin/users/{regular_user.id}"
    etag = client.get(url, headers=admin_headers).headers["etag"]

    response = client.patch(url, headers={**admin_headers, "If-Match": etag}, json={"password": "NewPass123"})
    assert response.status_code == 400


def test_delete_user(client, admin_headers, regular_user) -> None:
    url = f"/api/v1/admin/users/{regular_user.id}"
    assert client.delete(url, headers=admin_headers).status_code == 204
    assert client.get(url, headers=admin_headers).status_code == 404
    assert client.delete(url, headers=admin_headers).status_code == 204


def test_deleting_user_clears_cached_bookings_and_reviews(client, admin_headers, user_headers, regular_user) -> None:
    city = create_city(client, admin_headers)
    hotel = create_hotel(client, admin_headers, city["id"])
    room = create_room(client, admin_headers, hotel["id"])
    booking = client.post("/api/v1/bookings", headers=user_headers,
                          json={"user_id": regular_user.id, "room_id": room["id"]}).json()
    client.post("/api/v1/reviews", headers=user_headers,
                json={"user_id": regular_user.id, "hotel_id": hotel["id"], "rating": 4, "comment": "Quiet rooms"})

    assert len(client.get("/api/v1/bookings", headers=admin_headers).json()) == 1
    assert len(client.get("/api/v1/reviews", headers=admin_headers).json()) == 1
    assert client.get(f"/api/v1/bookings/{booking['id']}", headers=admin_headers).status_code == 200

    assert client.delete(f"/api/v1/admin/users/{regular_user.id}", headers=admin_headers).status_code == 204

    assert client.get("/api/v1/bookings", headers=admin_headers).json() == []
    assert client.get("/api/v1/reviews", headers=admin_headers).json() == []
    assert client.get(f"/api/v1/bookings/{booking['id']}", headers=admin_headers).status_code == 404
