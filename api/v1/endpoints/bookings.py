"""
Travel Booking API - Booking Endpoints
=======================================

Users create and read bookings; listing, updating and deleting are
Admin-only. Missing dates and price are filled in by BookingService.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from api.etag import cache_headers, list_etag, make_etag, maybe_304, require_if_match
from exceptions import NotFoundError
from schemas import BookingPatchDTO, BookingReadDTO, BookingWriteDTO
from services import BookingService

router = APIRouter()


@router.post(
    "",
    response_model=BookingReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create Booking",
    description="Book a room. check_in_date defaults to now, check_out_date to one night later.",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def create_booking(data: BookingWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    booking = BookingService.create_booking(db, data)
    response.headers["Location"] = str(request.url_for("get_booking", booking_id=booking.id))
    response.headers["ETag"] = make_etag(booking.last_updated)
    return booking


@router.get(
    "",
    response_model=List[BookingReadDTO],
    summary="List Bookings",
    dependencies=[Depends(require_roles("Admin"))],
)
def list_bookings(request: Request, response: Response, db: Session = Depends(get_db)):
    bookings = BookingService.get_bookings(db)
    if not bookings:
        return bookings

    etag = list_etag(bookings)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return bookings


@router.get(
    "/{booking_id}",
    response_model=BookingReadDTO,
    summary="Get Booking",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def get_booking(booking_id: int, request: Request, response: Response, db: Session = Depends(get_db)):
    booking = BookingService.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")

    etag = make_etag(booking.last_updated)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return booking


@router.patch(
    "/{booking_id}",
    response_model=BookingReadDTO,
    summary="Update Booking",
    dependencies=[Depends(require_roles("Admin"))],
)
def update_booking(
    booking_id: int,
    data: BookingPatchDTO,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    current = BookingService.get_booking(db, booking_id)
    if current is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    require_if_match(request, make_etag(current.last_updated))

    booking = BookingService.update_booking(db, booking_id, data)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    response.headers["ETag"] = make_etag(booking.last_updated)
    return booking


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel Booking",
    dependencies=[Depends(require_roles("Admin"))],
)
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    BookingService.delete_booking(db, booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
