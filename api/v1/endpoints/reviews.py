"""
Travel Booking API - Review Endpoints
======================================

Any authenticated user can manage reviews. PATCH requires If-Match.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_roles
from api.etag import cache_headers, list_etag, make_etag, maybe_304, require_if_match
from exceptions import NotFoundError
from schemas import ReviewPatchDTO, ReviewReadDTO, ReviewWriteDTO
from services import ReviewService

router = APIRouter(dependencies=[Depends(require_roles("User", "Admin"))])


@router.post(
    "",
    response_model=ReviewReadDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create Review",
)
def create_review(data: ReviewWriteDTO, request: Request, response: Response, db: Session = Depends(get_db)):
    review = ReviewService.create_review(db, data)
    response.headers["Location"] = str(request.url_for("get_review", review_id=review.id))
    response.headers["ETag"] = make_etag(review.last_updated)
    return review


@router.get("", response_model=List[ReviewReadDTO], summary="List Reviews")
def list_reviews(request: Request, response: Response, db: Session = Depends(get_db)):
    reviews = ReviewService.get_reviews(db)
    if not reviews:
        return reviews

    etag = list_etag(reviews)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return reviews


@router.get("/{review_id}", response_model=ReviewReadDTO, summary="Get Review")
def get_review(review_id: int, request: Request, response: Response, db: Session = Depends(get_db)):
    review = ReviewService.get_review(db, review_id)
    if review is None:
        raise NotFoundError(f"Review {review_id} not found")

    etag = make_etag(review.last_updated)
    not_modified = maybe_304(request, etag)
    if not_modified:
        return not_modified

    response.headers.update(cache_headers(etag))
    return review


@router.patch("/{review_id}", response_model=ReviewReadDTO, summary="Update Review")
def update_review(
    review_id: int,
    data: ReviewPatchDTO,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    current = ReviewService.get_review(db, review_id)
    if current is None:
        raise NotFoundError(f"Review {review_id} not found")
    require_if_match(request, make_etag(current.last_updated))

    review = ReviewService.update_review(db, review_id, data)
    if review is None:
        raise NotFoundError(f"Review {review_id} not found")
    response.headers["ETag"] = make_etag(review.last_updated)
    return review


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Review")
def delete_review(review_id: int, db: Session = Depends(get_db)):
    ReviewService.delete_review(db, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
