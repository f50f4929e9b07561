# educk/repos/order_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from educk.data.models.order import OrderModel, OrderItemModel
from educk.repos.base import BaseRepo


class OrderRepo(BaseRepo):
    def add_order(self, order: OrderModel) -> OrderModel:
        """Adds and flushes the order so it gets an id. Does not commit."""
        self.db.add(order)
        self.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items), selectinload(OrderModel.user))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars()
        )

    def list_orders(
        self,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[OrderModel], int]:
        query = select(OrderModel)
        if status:
            query = query.where(OrderModel.status == status)

        total = self.db.execute(
            select(func.count()).select_from(query.subquery())
        ).scalar_one()

        orders = self.db.execute(
            query.options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        return list(orders), total

    # ----- instructor reporting -----
    def revenue_for_courses(self, course_ids: list[int]):
        """Sum of line prices (after markdown) over paid orders. Order-level coupons are not split per course."""
        if not course_ids:
            return 0
        return self.db.execute(
            select(func.sum(OrderItemModel.price - OrderItemModel.discount_price))
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .where(
                OrderItemModel.course_id.in_(course_ids),
                OrderModel.payment_status == "completed",
            )
        ).scalar_one() or 0

    def recent_completed_orders(self, course_ids: list[int], limit: int = 10) -> list[OrderModel]:
        if not course_ids:
            return []
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.user))
                .where(
                    OrderModel.status == "completed",
                    OrderModel.items.any(OrderItemModel.course_id.in_(course_ids)),
                )
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
                .limit(limit)
            ).scalars()
        )
