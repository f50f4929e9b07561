# educk/api/routers/reviews.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from educk.api.deps import CurrentUser, get_current_user, require_admin
from educk.data.database import get_db
from educk.domain.errors import EduckError
from educk.domain.schemas import (
    CourseReviewsOut,
    MessageOut,
    ReviewChangeOut,
    ReviewIn,
    ReviewListOut,
    ReviewUpdate,
)
from educk.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.get("/course/{course_id}", response_model=CourseReviewsOut)
def list_course_reviews(
    course_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: ReviewService = Depends(get_service),
):
    try:
        return svc.list_course_reviews(course_id, page=page, limit=limit)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("", response_model=ReviewListOut)
def list_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: CurrentUser = Depends(require_admin),
    svc: ReviewService = Depends(get_service),
):
    return svc.list_reviews(page=page, limit=limit)


@router.post("", response_model=ReviewChangeOut, status_code=201)
def add_review(
    payload: ReviewIn,
    user: CurrentUser = Depends(get_current_user),
    svc: ReviewService = Depends(get_service),
):
    try:
        review = svc.add_review(user.id, payload)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Review added", "review": review}


@router.put("/{review_id}", response_model=ReviewChangeOut)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    user: CurrentUser = Depends(get_current_user),
    svc: ReviewService = Depends(get_service),
):
    try:
        review = svc.update_review(review_id, user.id, payload, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Review updated", "review": review}


@router.delete("/{review_id}", response_model=MessageOut)
def delete_review(
    review_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: ReviewService = Depends(get_service),
):
    try:
        svc.delete_review(review_id, user.id, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Review deleted"}
