# educk/services/user_service.py
from sqlalchemy.orm import Session

from educk.data.models.user import UserModel
from educk.domain.errors import EduckError, NotFoundError
from educk.domain.schemas import UserCreate, UserRead, NotificationOut
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        email = payload.email.strip().lower()
        if self.repo.get_user_by_email(email):
            raise EduckError("A user with this email already exists")

        user = UserModel(name=payload.name.strip(), email=email, role=payload.role.value, bio=payload.bio)
        created = self.repo.create_user(user)
        logger.info(f"User {created.id} created with role {created.role}")
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user)

    def get_notifications(self, user_id: int) -> list[NotificationOut]:
        self.get_user(user_id)
        return [NotificationOut.model_validate(n) for n in self.repo.get_notifications(user_id)]

    def mark_notifications_read(self, user_id: int) -> int:
        self.get_user(user_id)
        return self.repo.mark_notifications_read(user_id)
