# educk/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from educk.api.deps import CurrentUser, get_current_user, get_coupon_registry
from educk.data.database import get_db
from educk.domain.errors import EduckError
from educk.domain.pricing import CouponRegistry
from educk.domain.schemas import (
    AddToCartIn,
    ApplyCouponIn,
    CartOut,
    CheckoutIn,
    CheckoutOut,
    CouponOut,
    MessageOut,
)
from educk.services.cart_service import CartService
from educk.services.lock_service import LockService, get_lock_service
from educk.services.notification_service import NotificationService, get_notification_service
from educk.services.order_service import OrderService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    db: Session = Depends(get_db),
    coupons: CouponRegistry = Depends(get_coupon_registry),
) -> CartService:
    return CartService(db=db, coupons=coupons)


def get_order_service(
    db: Session = Depends(get_db),
    coupons: CouponRegistry = Depends(get_coupon_registry),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        coupons=coupons,
        lock_service=lock_service,
        notification_service=notification_service,
    )


@router.get("", response_model=CartOut)
def get_cart(
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(user.id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/add", response_model=MessageOut)
def add_to_cart(
    payload: AddToCartIn,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.add_course(user.id, payload.course_id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Course added to cart"}


@router.delete("/remove/{course_id}", response_model=MessageOut)
def remove_from_cart(
    course_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.remove_course(user.id, course_id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Course removed from cart"}


@router.delete("/clear", response_model=MessageOut)
def clear_cart(
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.clear(user.id)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Cart cleared"}


@router.post("/apply-coupon", response_model=CouponOut)
def apply_coupon(
    payload: ApplyCouponIn,
    user: CurrentUser = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.apply_coupon(user.id, payload.coupon_code)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/checkout", response_model=CheckoutOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    """
    Turns the cart into an order.
    Card and pix orders are settled at once; boleto orders wait for payment.
    """
    try:
        order = svc.checkout(user.id, payload.payment_method, payload.coupon_code)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Order created", "order": order}
