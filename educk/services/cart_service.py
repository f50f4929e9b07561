# educk/services/cart_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from educk.data.models.cart_item import CartItemModel
from educk.domain.errors import (
    AlreadyEnrolledError,
    CourseAlreadyInCartError,
    CourseNotInCartError,
    NotFoundError,
)
from educk.domain.pricing import CouponRegistry, PriceLine, compute_cart_totals
from educk.repos.cart_repo import CartRepo
from educk.repos.course_repo import CourseRepo
from educk.repos.user_repo import UserRepo
from educk.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases.
    commands (add, remove, clear) change the cart
    queries (get, apply_coupon) only read it
    """

    def __init__(self, db: Session, coupons: CouponRegistry):
        self.repo = CartRepo(db)
        self.courses = CourseRepo(db)
        self.users = UserRepo(db)
        self.coupons = coupons

    def _require_user(self, user_id: int):
        user = self.users.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    # query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        self._require_user(user_id)

        items = self.repo.get_cart_items(user_id)
        lines = [PriceLine.from_course(i.course) for i in items]
        totals = compute_cart_totals(lines)

        return {
            "items": [
                {
                    "course_id": line.course_id,
                    "title": line.title,
                    "price": line.price,
                    "discount_price": line.discount_price,
                    "final_price": line.final_price,
                    "instructor": item.course.instructor.name,
                    "added_at": item.added_at,
                }
                for item, line in zip(items, lines)
            ],
            "subtotal": totals.subtotal,
            "discount": totals.per_item_discount,
            "total": totals.total,
            "item_count": len(items),
        }

    def apply_coupon(self, user_id: int, coupon_code: str) -> Dict[str, Any]:
        """Previews a coupon against the current cart. Nothing is stored."""
        self._require_user(user_id)

        lines = [PriceLine.from_course(i.course) for i in self.repo.get_cart_items(user_id)]
        totals = compute_cart_totals(lines)
        result = self.coupons.apply(totals.total, coupon_code)

        logger.info(f"Coupon {result.code} previewed by user {user_id}: -{result.discount_amount}")

        return {
            "code": result.code,
            "percentage": result.percentage,
            "discount": result.discount_amount,
            "total": result.final_total,
        }

    # commands
    def add_course(self, user_id: int, course_id: int) -> None:
        course = self.courses.get_course(course_id)
        if not course or not course.is_published:
            raise NotFoundError("Course not found")

        self._require_user(user_id)

        if self.users.is_enrolled(user_id, course_id):
            raise AlreadyEnrolledError()

        if self.repo.get_cart_item(user_id, course_id):
            raise CourseAlreadyInCartError()

        self.repo.add_cart_item(CartItemModel(user_id=user_id, course_id=course_id))
        logger.info(f"Course {course_id} added to cart of user {user_id}")

    def remove_course(self, user_id: int, course_id: int) -> None:
        self._require_user(user_id)

        item = self.repo.get_cart_item(user_id, course_id)
        if not item:
            raise CourseNotInCartError()

        self.repo.delete_cart_item(item)
        logger.info(f"Course {course_id} removed from cart of user {user_id}")

    def clear(self, user_id: int) -> None:
        self._require_user(user_id)

        removed = self.repo.clear_cart(user_id)
        self.repo.commit()
        logger.info(f"Cart of user {user_id} cleared ({removed} item(s))")
