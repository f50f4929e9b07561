# educk/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import joinedload

from educk.data.models.cart_item import CartItemModel
from educk.data.models.course import CourseModel
from educk.repos.base import BaseRepo


class CartRepo(BaseRepo):
    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .options(joinedload(CartItemModel.course).joinedload(CourseModel.instructor))
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.added_at, CartItemModel.id)
            ).scalars()
        )

    def get_cart_item(self, user_id: int, course_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.course_id == course_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.commit()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.commit()

    def clear_cart(self, user_id: int) -> int:
        """Deletes every cart line of the user. Does not commit."""
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.user_id == user_id)
        )
        return result.rowcount
