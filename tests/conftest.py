import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from educk.api import create_app
from educk.api.deps import get_coupon_registry
from educk.data.database import Base, get_db
from educk.data.models import CartItemModel, CourseModel, UserModel
from educk.domain.pricing import CouponRegistry
from educk.services.lock_service import LockService, get_lock_service
from educk.services.notification_service import get_notification_service
from educk.utils.settings import DEFAULT_COUPONS, JWT_ALGORITHM, JWT_SECRET

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class InMemoryLockService(LockService):
    """LockService with a dict instead of Redis."""

    def __init__(self):
        self.locks = {}
        self.acquired = []

    def acquire_checkout_lock(self, user_id, token, ttl):
        if user_id in self.locks:
            return False
        self.locks[user_id] = token
        self.acquired.append(user_id)
        return True

    def release_checkout_lock(self, user_id, token):
        if self.locks.get(user_id) == token:
            del self.locks[user_id]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_enrollment_notification(self, user_id, order_id, course_titles):
        self.sent.append((user_id, order_id, list(course_titles)))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def coupons():
    return CouponRegistry(DEFAULT_COUPONS)


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(db, coupons, lock_service, notifier):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_coupon_registry] = lambda: coupons
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_notification_service] = lambda: notifier
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def make_token(user_id, role="student", expires_in=timedelta(hours=1)):
    claims = {
        "sub": str(user_id),
        "role": role,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
def auth():
    def headers(user, role=None):
        return {"Authorization": f"Bearer {make_token(user.id, role or user.role)}"}

    return headers


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def factory(name="Ana", role="student"):
        counter["n"] += 1
        user = UserModel(name=name, email=f"{name.lower()}{counter['n']}@educk.test", role=role)
        db.add(user)
        db.commit()
        return user

    return factory


@pytest.fixture
def instructor(make_user):
    return make_user("Paulo", role="teacher")


@pytest.fixture
def make_course(db, instructor):
    def factory(title="Python 101", price="99.90", discount_price="0", published=True, owner=None):
        course = CourseModel(
            title=title,
            description=f"{title} full description",
            short_description=f"{title} in short",
            category="programming",
            level="beginner",
            instructor_id=(owner or instructor).id,
            price=Decimal(price),
            discount_price=Decimal(discount_price),
            status="published" if published else "draft",
            is_published=published,
            published_at=datetime.now(timezone.utc) if published else None,
            sales_count=0,
        )
        db.add(course)
        db.commit()
        return course

    return factory


@pytest.fixture
def fill_cart(db):
    def fill(user, *courses):
        for course in courses:
            db.add(CartItemModel(user_id=user.id, course_id=course.id))
        db.commit()

    return fill



@pytest.fixture
def session_factory(db):
    return TestingSessionLocal
