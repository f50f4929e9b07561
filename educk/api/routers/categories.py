# educk/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from educk.api.deps import CurrentUser, require_admin
from educk.data.database import get_db
from educk.domain.errors import EduckError
from educk.domain.schemas import CategoryChangeOut, CategoryCreate, CategoryOut, CategoryUpdate, CourseListOut
from educk.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.get("", response_model=List[CategoryOut])
def list_categories(svc: CategoryService = Depends(get_service)):
    return svc.list_categories()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, svc: CategoryService = Depends(get_service)):
    try:
        return svc.get_category(category_id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{category_id}/courses", response_model=CourseListOut)
def list_category_courses(
    category_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: CategoryService = Depends(get_service),
):
    try:
        return svc.list_courses(category_id, page=page, limit=limit)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("", response_model=CategoryChangeOut, status_code=201)
def create_category(
    payload: CategoryCreate,
    _: CurrentUser = Depends(require_admin),
    svc: CategoryService = Depends(get_service),
):
    try:
        category = svc.create_category(payload)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Category created", "category": category}


@router.put("/{category_id}", response_model=CategoryChangeOut)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    _: CurrentUser = Depends(require_admin),
    svc: CategoryService = Depends(get_service),
):
    try:
        category = svc.update_category(category_id, payload)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Category updated", "category": category}


@router.delete("/{category_id}", response_model=CategoryChangeOut)
def delete_category(
    category_id: int,
    _: CurrentUser = Depends(require_admin),
    svc: CategoryService = Depends(get_service),
):
    try:
        message, category = svc.delete_category(category_id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": message, "category": category}
