# educk/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from educk.api.deps import CurrentUser, get_current_user, require_admin
from educk.api.routers.carts import get_order_service
from educk.domain.enums import OrderStatus
from educk.domain.errors import EduckError
from educk.domain.schemas import (
    OrderListOut,
    OrderOut,
    OrderStatusIn,
    OrderStatusOut,
    PaymentStatusOut,
    ReceiptOut,
)
from educk.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/me", response_model=List[OrderOut])
def get_my_orders(
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_user_orders(user.id)


@router.get("", response_model=OrderListOut)
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    _: CurrentUser = Depends(require_admin),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(status=status, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_order(order_id, user.id, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{order_id}/payment-status", response_model=PaymentStatusOut)
def get_payment_status(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_payment_status(order_id, user.id, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{order_id}/receipt", response_model=ReceiptOut)
def get_receipt(
    order_id: int,
    user: CurrentUser = Depends(get_current_user),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_receipt(order_id, user.id, is_admin=user.is_admin)
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{order_id}/status", response_model=OrderStatusOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    _: CurrentUser = Depends(require_admin),
    svc: OrderService = Depends(get_order_service),
):
    """
    Admin status change. Marking the payment completed grants course access.
    """
    try:
        order = svc.update_order_status(
            order_id,
            status=payload.status,
            payment_status=payload.payment_status,
        )
    except EduckError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Order status updated", "order": order}
