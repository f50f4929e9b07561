# educk/repos/base.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from educk.domain.errors import PersistenceError
from educk.utils.logging import get_logger

logger = get_logger(__name__)


class BaseRepo:
    def __init__(self, db: Session):
        self.db = db

    def flush(self):
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.rollback()
            logger.error(f"Flush failed: {e}")
            raise PersistenceError() from e

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.rollback()
            logger.error(f"Commit failed, transaction rolled back: {e}")
            raise PersistenceError() from e

    def rollback(self):
        self.db.rollback()
