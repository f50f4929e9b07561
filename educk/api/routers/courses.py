# educk/api/routers/courses.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from educk.api.deps import CurrentUser, require_admin, require_teacher
from educk.data.database import get_db
from educk.domain.enums import CourseLevel
from educk.domain.errors import EduckError
from educk.domain.schemas import CourseCreate, CourseListOut, CourseOut, CourseStatusIn, CourseUpdate
from educk.services.course_service import CourseService

router = APIRouter(prefix="/courses", tags=["courses"])


def get_service(db: Session = Depends(get_db)) -> CourseService:
    return CourseService(db)


@router.get("", response_model=CourseListOut)
def list_courses(
    category: Optional[str] = Query(None),
    level: Optional[CourseLevel] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: CourseService = Depends(get_service),
):
    return svc.list_published(
        category=category,
        level=level.value if level else None,
        search=search,
        page=page,
        limit=limit,
    )


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, svc: CourseService = Depends(get_service)):
    try:
        return svc.get_course(course_id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=CourseOut, status_code=201)
def create_course(
    payload: CourseCreate,
    user: CurrentUser = Depends(require_teacher),
    svc: CourseService = Depends(get_service),
):
    try:
        return svc.create_course(user.id, payload)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: int,
    payload: CourseUpdate,
    user: CurrentUser = Depends(require_teacher),
    svc: CourseService = Depends(get_service),
):
    try:
        return svc.update_course(course_id, user.id, payload, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/{course_id}/submit", response_model=CourseOut)
def submit_course(
    course_id: int,
    user: CurrentUser = Depends(require_teacher),
    svc: CourseService = Depends(get_service),
):
    try:
        return svc.submit_for_review(course_id, user.id, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{course_id}/status", response_model=CourseOut)
def moderate_course(
    course_id: int,
    payload: CourseStatusIn,
    _: CurrentUser = Depends(require_admin),
    svc: CourseService = Depends(get_service),
):
    try:
        return svc.moderate(course_id, payload.status)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
