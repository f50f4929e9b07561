# educk/api/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from educk.api.deps import CurrentUser, get_current_user, require_admin, require_teacher
from educk.data.database import get_db
from educk.domain.errors import EduckError
from educk.domain.schemas import CourseOut, MessageOut, NotificationOut, TeacherDashboardOut, UserCreate, UserRead
from educk.services.course_service import CourseService
from educk.services.dashboard_service import DashboardService
from educk.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    payload: UserCreate,
    _: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    try:
        return service.create_user(payload)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/me", response_model=UserRead)
def get_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(user.id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/me/courses", response_model=List[CourseOut])
def get_my_courses(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return CourseService(db).list_enrolled(user.id)


@router.get("/me/dashboard", response_model=TeacherDashboardOut)
def get_my_dashboard(user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    return DashboardService(db).teacher_dashboard(user.id)


@router.get("/me/notifications", response_model=List[NotificationOut])
def get_my_notifications(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_notifications(user.id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/me/notifications/read", response_model=MessageOut)
def mark_notifications_read(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        count = service.mark_notifications_read(user.id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": f"{count} notification(s) marked as read"}
