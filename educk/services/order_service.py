# educk/services/order_service.py
import math
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from educk.data.models.order import OrderModel, OrderItemModel
from educk.domain.enums import (
    OrderStatus,
    PaymentStatus,
    ORDER_STATUS_TRANSITIONS,
    PAYMENT_STATUS_TRANSITIONS,
    check_transition,
)
from educk.domain.errors import EmptyCartError, ForbiddenError, NotFoundError, PersistenceError
from educk.domain.payments import build_payment_details, parse_payment_method, settles_immediately
from educk.domain.pricing import CouponRegistry, PriceLine, price_order
from educk.repos.cart_repo import CartRepo
from educk.repos.order_repo import OrderRepo
from educk.repos.user_repo import UserRepo
from educk.services.enrollment_service import EnrollmentService
from educk.services.lock_service import LockService
from educk.services.notification_service import NotificationService
from educk.utils.logging import get_logger

logger = get_logger(__name__)


def order_summary(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "total_amount": order.total_amount,
        "discount_amount": order.discount_amount,
        "final_amount": order.final_amount,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "status": order.status,
        "payment_details": order.payment_details or {},
    }


def order_items(order: OrderModel) -> list[Dict[str, Any]]:
    result = []
    for item in order.items:
        line = PriceLine(
            course_id=item.course_id,
            title=item.title,
            price=item.price,
            discount_price=item.discount_price,
        )
        result.append(
            {
                "course_id": item.course_id,
                "title": item.title,
                "price": item.price,
                "discount_price": item.discount_price,
                "final_price": line.final_price,
            }
        )
    return result


def order_detail(order: OrderModel) -> Dict[str, Any]:
    return {
        **order_summary(order),
        "user_id": order.user_id,
        "items": order_items(order),
        "coupon_code": order.coupon_code,
        "coupon_percentage": order.coupon_percentage,
        "created_at": order.created_at,
    }


class OrderService:
    """
    Order use cases: checkout (cart -> order -> settlement), order queries
    and the administrative status update.
    """

    def __init__(
        self,
        db: Session,
        coupons: CouponRegistry,
        lock_service: LockService,
        notification_service: NotificationService,
    ):
        self.orders = OrderRepo(db)
        self.carts = CartRepo(db)
        self.users = UserRepo(db)
        self.enrollments = EnrollmentService(db)
        self.coupons = coupons
        self.lock_service = lock_service
        self.notification_service = notification_service

    # =====================================================
    # COMMANDS
    # =====================================================
    def checkout(self, user_id: int, payment_method: str, coupon_code: str | None = None) -> Dict[str, Any]:
        """
        Use case: checkout.

        1. validate cart, payment method and coupon
        2. snapshot prices and compute totals
        3. add the order, settle it when the method pays at once
        4. clear the cart
        Steps 3-4 commit together; on failure nothing is written.
        """
        if not self.users.get_user(user_id):
            raise NotFoundError("User not found")

        coupon_code = (coupon_code or "").strip() or None

        with self.lock_service.checkout_lock(user_id):
            items = self.carts.get_cart_items(user_id)
            if not items:
                raise EmptyCartError()

            method = parse_payment_method(payment_method)
            pricing = price_order(
                [PriceLine.from_course(i.course) for i in items],
                coupon_code,
                self.coupons,
            )

            order = OrderModel(
                user_id=user_id,
                total_amount=pricing.subtotal,
                discount_amount=pricing.discount_amount,
                final_amount=pricing.final_amount,
                coupon_code=pricing.coupon.code if pricing.coupon else None,
                coupon_percentage=pricing.coupon.percentage if pricing.coupon else None,
                payment_method=method.value,
                payment_status=PaymentStatus.PENDING.value,
                status=OrderStatus.PENDING.value,
                payment_details=build_payment_details(method),
                items=[
                    OrderItemModel(
                        course_id=line.course_id,
                        title=line.title,
                        price=line.price,
                        discount_price=line.discount_price,
                    )
                    for line in pricing.lines
                ],
            )

            granted = []
            try:
                self.orders.add_order(order)

                if settles_immediately(method):
                    order.payment_status = PaymentStatus.COMPLETED.value
                    order.status = OrderStatus.COMPLETED.value
                    granted = self.enrollments.grant_access(order)

                self.carts.clear_cart(user_id)
                self.orders.commit()
            except SQLAlchemyError as e:
                self.orders.rollback()
                logger.error(f"Checkout failed for user {user_id}: {e}")
                raise PersistenceError("Could not complete checkout") from e

        logger.info(
            f"Order {order.id} created for user {user_id}: method={order.payment_method} "
            f"final={order.final_amount} payment_status={order.payment_status}"
        )

        if granted:
            self._notify_granted(order, granted)

        return order_summary(order)

    def update_order_status(
        self,
        order_id: int,
        status: OrderStatus | None = None,
        payment_status: PaymentStatus | None = None,
    ) -> Dict[str, Any]:
        """
        Use case: administrative status change.

        Access is granted only on the payment edge into 'completed'; totals are
        never recomputed here.
        """
        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        # validate both before touching the order
        status_changes = status is not None and check_transition(
            ORDER_STATUS_TRANSITIONS, OrderStatus(order.status), status
        )
        payment_changes = payment_status is not None and check_transition(
            PAYMENT_STATUS_TRANSITIONS, PaymentStatus(order.payment_status), payment_status
        )

        granted = []
        try:
            if status_changes:
                order.status = status.value

            if payment_changes:
                order.payment_status = payment_status.value
                if payment_status == PaymentStatus.COMPLETED:
                    granted = self.enrollments.grant_access(order)

            self.orders.commit()
        except SQLAlchemyError as e:
            self.orders.rollback()
            logger.error(f"Status update failed for order {order_id}: {e}")
            raise PersistenceError("Could not update order status") from e

        logger.info(f"Order {order.id} status={order.status} payment_status={order.payment_status}")

        if granted:
            self._notify_granted(order, granted)

        return {
            "id": order.id,
            "status": order.status,
            "payment_status": order.payment_status,
        }

    def _notify_granted(self, order: OrderModel, granted: list[int]):
        # runs after commit, so failures are only logged
        titles = [i.title for i in order.items if i.course_id in granted]
        try:
            self.notification_service.send_enrollment_notification(order.user_id, order.id, titles)
        except Exception as e:
            logger.error(f"Could not queue enrollment notification for order {order.id}: {e}")

    # =====================================================
    # QUERIES
    # =====================================================
    def _get_visible_order(self, order_id: int, user_id: int, is_admin: bool) -> OrderModel:
        order = self.orders.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user_id and not is_admin:
            raise ForbiddenError("You cannot access this order")

        return order

    def list_user_orders(self, user_id: int) -> list[Dict[str, Any]]:
        return [order_detail(o) for o in self.orders.list_user_orders(user_id)]

    def get_order(self, order_id: int, user_id: int, is_admin: bool = False) -> Dict[str, Any]:
        return order_detail(self._get_visible_order(order_id, user_id, is_admin))

    def get_payment_status(self, order_id: int, user_id: int, is_admin: bool = False) -> Dict[str, Any]:
        # no gateway to ask, the stored status is authoritative
        order = self._get_visible_order(order_id, user_id, is_admin)
        return {
            "order_id": order.id,
            "payment_status": order.payment_status,
            "payment_method": order.payment_method,
            "payment_details": order.payment_details or {},
        }

    def get_receipt(self, order_id: int, user_id: int, is_admin: bool = False) -> Dict[str, Any]:
        order = self._get_visible_order(order_id, user_id, is_admin)
        return {
            "receipt_number": f"REC-{order.id:08d}",
            "order_date": order.created_at,
            "customer": {"name": order.user.name, "email": order.user.email},
            "items": order_items(order),
            "payment_method": order.payment_method,
            "total_amount": order.total_amount,
            "discount_amount": order.discount_amount,
            "final_amount": order.final_amount,
            "status": order.status,
        }

    def list_orders(self, status: OrderStatus | None = None, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        orders, total = self.orders.list_orders(
            status=status.value if status else None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {
            "orders": [order_detail(o) for o in orders],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
        }
