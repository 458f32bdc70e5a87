# storefront/api/routers/orders.py
from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import (
    DashboardMetrics,
    OrderOut,
    OrderPage,
    OrderStatusIn,
    PlaceOrderIn,
)
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.utils.settings import CHECKOUT_LOCK_ENABLED, MAX_PAGE_SIZE

router = APIRouter(prefix="/orders", tags=["orders"])


def get_lock_service() -> LockService | None:
    return LockService() if CHECKOUT_LOCK_ENABLED else None


def get_service(
    db: Session = Depends(get_db),
    lock_service: LockService | None = Depends(get_lock_service),
) -> OrderService:
    return OrderService(
        db,
        notification_service=NotificationService(),
        lock_service=lock_service,
    )


@router.post("/", response_model=OrderOut, status_code=201)
def place_order(payload: PlaceOrderIn, svc: OrderService = Depends(get_service)):
    """
    Składa zamówienie z koszyka użytkownika.
    Wysyła powiadomienie asynchronicznie.
    """
    try:
        return svc.place_order(payload.user_id, payload.shipping_address_id)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/", response_model=OrderPage)
def list_orders(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    status: OrderStatus | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    svc: OrderService = Depends(get_service),
):
    # jeden filtr naraz: status albo zakres dat
    if status is not None and (start is not None or end is not None):
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_argument", "message": "Filter by status or by date range, not both"},
        )
    if (start is None) != (end is None):
        raise HTTPException(
            status_code=400,
            detail={"code": "invalid_argument", "message": "Both start and end are required"},
        )

    try:
        if status is not None:
            return svc.list_by_status(status, page, size)
        if start is not None:
            return svc.list_between(start, end, page, size)
        return svc.list_all(page, size)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/dashboard/metrics", response_model=DashboardMetrics)
def dashboard_metrics(svc: OrderService = Depends(get_service)):
    return svc.dashboard_metrics()


@router.get("/status-count", response_model=Dict[OrderStatus, int])
def counts_by_status(svc: OrderService = Depends(get_service)):
    return svc.counts_by_status()


@router.get("/user/{user_id}", response_model=OrderPage)
def list_user_orders(
    user_id: int,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.list_by_user(user_id, page, size)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, svc: OrderService = Depends(get_service)):
    try:
        return svc.get_order(order_id)
    except StorefrontError as e:
        raise to_http(e)


@router.put("/{order_id}/status", response_model=OrderOut)
def update_status(order_id: int, payload: OrderStatusIn, svc: OrderService = Depends(get_service)):
    try:
        return svc.update_status(order_id, payload.status)
    except StorefrontError as e:
        raise to_http(e)
