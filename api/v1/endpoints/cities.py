"""
Travel Booking API - City Endpoints
====================================

Cities carry no ETag; PATCH is a plain partial update.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from exceptions import NotFoundError
from schemas import CityPatchDTO, CityReadDTO, CityWriteDTO
from services import CityService

router = APIRouter()


@router.post(
    "",
    response_model=CityReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create City",
    dependencies=[Depends(require_roles("Admin"))],
)
def create_city(data: CityWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    city = CityService.create_city(db, data)
    response.headers["Location"] = str(request.url_for("get_city", city_id=city.id))
    return city


@router.get(
    "",
    response_model=List[CityReadDTO],
    summary="List Cities",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def list_cities(db: Session = Depends(get_db)):
    return CityService.get_cities(db)


@router.get(
    "/{city_id}",
    response_model=CityReadDTO,
    summary="Get City",
    dependencies=[Depends(require_roles("User", "Admin"))],
)
def get_city(city_id: int, db: Session = Depends(get_db)):
    city = CityService.get_city(db, city_id)
    if city is None:
        raise NotFoundError(f"City {city_id} not found")
    return city


@router.patch(
    "/{city_id}",
    response_model=CityReadDTO,
    summary="Update City",
    dependencies=[Depends(require_roles("Admin"))],
)
def update_city(city_id: int, data: CityPatchDTO, db: Session = Depends(get_db)):
    city = CityService.update_city(db, city_id, data)
    if city is None:
        raise NotFoundError(f"City {city_id} not found")
    return city


@router.delete(
    "/{city_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete City",
    dependencies=[Depends(require_roles("Admin"))],
)
def delete_city(city_id: int, db: Session = Depends(get_db)):
    CityService.delete_city(db, city_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
