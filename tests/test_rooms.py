# Tests for room CRUD and list filters.

from __future__ import annotations

import pytest

from cache import cache
from tests.support import create_city, create_hotel, create_room


@pytest.fixture
def hotel(client, admin_headers):
    city = create_city(client, admin_headers)
    return create_hotel(client, admin_headers, city["id"])


@pytest.fixture
def rooms(client, admin_headers, hotel):
    return [
        create_room(client, admin_headers, hotel["id"], room_type="Single", price_per_night=60,
                    adult_capacity=1),
        create_room(client, admin_headers, hotel["id"], room_type="Suite", price_per_night=300,
                    adult_capacity=4, children_capacity=2),
        create_room(client, admin_headers, hotel["id"], room_type="Double", price_per_night=150,
                    is_available=False),
    ]


def _ids(response):
    return sorted(room["id"] for room in response.json())


def test_create_room_defaults(client, admin_headers, hotel) -> None:
    response = client.post("/api/v1/rooms", headers=admin_headers, json={
        "room_type": "Deluxe",
        "price_per_night": 99.5,
        "hotel_id": hotel["id"],
    })
    assert response.status_code == 201
    room = response.json()
    assert room["adult_capacity"] == 2
    assert room["children_capacity"] == 0
    assert room["is_available"] is True
    assert room["images"] == []
    assert response.headers["location"].endswith(f"/api/v1/rooms/{room['id']}")


@pytest.mark.parametrize(
    "overrides",
    [
        {"room_type": "Penthouse"},
        {"price_per_night": 0},
        {"description": "Far too long for a room label"},
        {"adult_capacity": -1},
    ],
)
def test_room_validation(client, admin_headers, hotel, overrides) -> None:
    payload = {"room_type": "Standard", "price_per_night": 80, "hotel_id": hotel["id"], **overrides}
    assert client.post("/api/v1/rooms", headers=admin_headers, json=payload).status_code == 400


def test_room_requires_existing_hotel(client, admin_headers) -> None:
    response = client.post("/api/v1/rooms", headers=admin_headers, json={
        "room_type": "Standard", "price_per_night": 80, "hotel_id": 404,
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Hotel not found"


def test_images_round_trip_as_list(client, admin_headers, user_headers, hotel) -> None:
    images = ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"]
    room = create_room(client, admin_headers, hotel["id"], images=images)

    fetched = client.get(f"/api/v1/rooms/{room['id']}", headers=user_headers)
    assert fetched.json()["images"] == images


def test_filters(client, user_headers, rooms) -> None:
    single, suite, double = rooms

    by_type = client.get("/api/v1/rooms", params={"room_type": "Suite"}, headers=user_headers)
    assert _ids(by_type) == [suite["id"]]

    by_price = client.get("/api/v1/rooms", params={"min_price": 100, "max_price": 200}, headers=user_headers)
    assert _ids(by_price) == [double["id"]]

    available = client.get("/api/v1/rooms", params={"is_available": "true"}, headers=user_headers)
    assert _ids(available) == sorted([single["id"], suite["id"]])

    families = client.get("/api/v1/rooms", params={"adult_capacity": 2, "children_capacity": 1},
                          headers=user_headers)
    assert _ids(families) == [suite["id"]]


def test_filtered_list_bypasses_cache(client, user_headers, rooms) -> None:
    client.get("/api/v1/rooms", params={"room_type": "Suite"}, headers=user_headers)
    assert cache.get("rooms-list") is None

    everything = client.get("/api/v1/rooms", headers=user_headers)
    assert len(everything.json()) == 3
    assert cache.get("rooms-list") is not None


def test_unknown_filter_value(client, user_headers) -> None:
    response = client.get("/api/v1/rooms", params={"room_type": "Castle"}, headers=user_headers)
    assert response.status_code == 400


def test_patch_room_with_if_match(client, admin_headers, hotel) -> None:
    room = create_room(client, admin_headers, hotel["id"])
    url = f"/api/v1/rooms/{room['id']}"
    etag = client.get(url, headers=admin_headers).headers["etag"]

    response = client.patch(url, headers={**admin_headers, "If-Match": etag},
                            json={"price_per_night": 135, "is_available": False})
    assert response.status_code == 200
    assert response.json()["price_per_night"] == 135
    assert response.json()["is_available"] is False
    assert response.json()["room_type"] == room["room_type"]

    assert client.patch(url, headers=admin_headers, json={"price_per_night": 10}).status_code == 412


def test_deleting_hotel_removes_its_rooms(client, admin_headers, user_headers, hotel) -> None:
    room = create_room(client, admin_headers, hotel["id"])
    assert client.get(f"/api/v1/rooms/{room['id']}", headers=user_headers).status_code == 200

    assert client.delete(f"/api/v1/hotels/{hotel['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/v1/rooms/{room['id']}", headers=user_headers).status_code == 404
    assert client.get("/api/v1/rooms", headers=user_headers).json() == []
