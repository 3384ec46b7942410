"""
Travel Booking API - Admin Endpoints
=====================================

User management, Admin role only. Accounts created here are confirmed
immediately (no OTP round trip).
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from api.etag import cache_headers, list_etag, make_etag, maybe_304, require_if_match
from exceptions import NotFoundError
from schemas import UserPatchDTO, UserReadDTO, UserWriteDTO
from services import AdminService

router = APIRouter(dependencies=[Depends(require_roles("Admin"))])


@router.post(
    "/users",
    response_model=UserReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
)
def create_user(data: UserWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    user = AdminService.create_user(db, data)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    response.headers["ETag"] = make_etag(user.last_updated)
    return user


@router.get("/users", response_model=List[UserReadDTO], summary="List Users")
def list_users(request: Request, response: Response, db: Session = Depends(get_db)):
    users = AdminService.get_users(db)
    if not users:
        return users

    etag = list_etag(users)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return users


@router.get("/users/{user_id}", response_model=UserReadDTO, summary="Get User")
def get_user(user_id: int, request: Request, response: Response, db: Session = Depends(get_db)):
    user = AdminService.get_user(db, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")

    etag = make_etag(user.last_updated)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return user


@router.patch("/users/{user_id}", response_model=UserReadDTO, summary="Update User")
def update_user(
    user_id: int,
    data: UserPatchDTO,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    current = AdminService.get_user(db, user_id)
    if current is None:
        raise NotFoundError(f"User {user_id} not found")
    require_if_match(request, make_etag(current.last_updated))

    user = AdminService.update_user(db, user_id, data)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    response.headers["ETag"] = make_etag(user.last_updated)
    return user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete User")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    AdminService.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
