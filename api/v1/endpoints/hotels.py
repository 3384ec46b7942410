"""
Travel Booking API - Hotel Endpoints
=====================================

Reads are open to any authenticated user and support If-None-Match.
Writes are Admin-only; PATCH requires If-Match with the current ETag.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from api.etag import cache_headers, list_etag, make_etag, maybe_304, require_if_match
from exceptions import NotFoundError
from schemas import HotelPatchDTO, HotelReadDTO, HotelWriteDTO
from services import HotelService

router = APIRouter()


# ==========================================
# ENDPOINTS
# ==========================================

@router.post(
    "",
    response_model=HotelReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create Hotel",
    description="Create a hotel in an existing city. Subscribed users get an announcement email.",
    dependencies=[Depends(require_roles("Admin"))],
)
def create_hotel(data: HotelWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    hotel = HotelService.create_hotel(db, data)
    response.headers["Location"] = str(request.url_for("get_hotel", hotel_id=hotel.id))
    response.headers["ETag"] = make_etag(hotel.last_updated)
    return hotel


@router.get(
    "",
    response_model=List[HotelReadDTO],
    summary="List Hotels",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def list_hotels(request: Request, response: Response, db: Session = Depends(get_db)):
    hotels = HotelService.get_hotels(db)
    if not hotels:
        return hotels

    etag = list_etag(hotels)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return hotels


@router.get(
    "/{hotel_id}",
    response_model=HotelReadDTO,
    summary="Get Hotel",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def get_hotel(hotel_id: int, request: Request, response: Response, db: Session = Depends(get_db)):
    hotel = HotelService.get_hotel(db, hotel_id)
    if hotel is None:
        raise NotFoundError(f"Hotel {hotel_id} not found")

    etag = make_etag(hotel.last_updated)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return hotel


@router.patch(
    "/{hotel_id}",
    response_model=HotelReadDTO,
    summary="Update Hotel",
    description="Partial update. Send the ETag from a previous GET in If-Match.",
    dependencies=[Depends(require_roles("Admin"))],
)
def update_hotel(
    hotel_id: int,
    data: HotelPatchDTO,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    current = HotelService.get_hotel(db, hotel_id)
    if current is None:
        raise NotFoundError(f"Hotel {hotel_id} not found")
    require_if_match(request, make_etag(current.last_updated))

    hotel = HotelService.update_hotel(db, hotel_id, data)
    if hotel is None:
        raise NotFoundError(f"Hotel {hotel_id} not found")
    response.headers["ETag"] = make_etag(hotel.last_updated)
    return hotel


@router.delete(
    "/{hotel_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Hotel",
    dependencies=[Depends(require_roles("Admin"))],
)
def delete_hotel(hotel_id: int, db: Session = Depends(get_db)):
    HotelService.delete_hotel(db, hotel_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
