"""
Travel Booking API - Room Endpoints
====================================

The list endpoint accepts optional filters (type, price range, availability,
minimum capacities). Filtered lists are always read from the database.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from api.etag import cache_headers, list_etag, make_etag, maybe_304, require_if_match
from exceptions import NotFoundError
from schemas import RoomPatchDTO, RoomQueryDTO, RoomReadDTO, RoomWriteDTO
from services import RoomService

router = APIRouter()


# ==========================================
# ENDPOINTS
# ==========================================

@router.post(
    "",
    response_model=RoomReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create Room",
    dependencies=[Depends(require_roles("Admin"))],
)
def create_room(data: RoomWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    room = RoomService.create_room(db, data)
    response.headers["Location"] = str(request.url_for("get_room", room_id=room.id))
    response.headers["ETag"] = make_etag(room.last_updated)
    return room


@router.get(
    "",
    response_model=List[RoomReadDTO],
    summary="List Rooms",
    description="List rooms. adult_capacity and children_capacity are minimums.",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def list_rooms(
    request: Request,
    response: Response,
    query: RoomQueryDTO = Depends(),
    db: Session = Depends(get_db),
):
    rooms = RoomService.get_rooms(db, query)
    if not rooms:
        return rooms

    etag = list_etag(rooms)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return rooms


@router.get(
    "/{room_id}",
    response_model=RoomReadDTO,
    summary="Get Room Details",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def get_room(room_id: int, request: Request, response: Response, db: Session = Depends(get_db)):
    room = RoomService.get_room(db, room_id)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")

    etag = make_etag(room.last_updated)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return room


@router.patch(
    "/{room_id}",
    response_model=RoomReadDTO,
    summary="Update Room",
    dependencies=[Depends(require_roles("Admin"))],
)
def update_room(
    room_id: int,
    data: RoomPatchDTO,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    current = RoomService.get_room(db, room_id)
    if current is None:
        raise NotFoundError(f"Room {room_id} not found")
    require_if_match(request, make_etag(current.last_updated))

    room = RoomService.update_room(db, room_id, data)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")
    response.headers["ETag"] = make_etag(room.last_updated)
    return room


@router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Room",
    dependencies=[Depends(require_roles("Admin"))],
)
def delete_room(room_id: int, db: Session = Depends(get_db)):
    RoomService.delete_room(db, room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
