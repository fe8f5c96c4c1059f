# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_change_feed,
    get_current_user,
    get_optional_user,
    http_error,
    SERVICE_ERRORS,
)
from storefront.data.database import get_db
from storefront.data.models.profile import ProfileModel
from storefront.domain.schemas import CheckoutIn, BuyNowIn, OrderOut
from storefront.services.change_feed import ChangeFeed
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)):
    return OrderService(db, feed)


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    user: ProfileModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Places an order for the whole cart and empties it.
    """
    try:
        return svc.checkout_cart(user, payload.shipping)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/buy-now", response_model=OrderOut, status_code=201)
def buy_now(
    payload: BuyNowIn,
    user: ProfileModel | None = Depends(get_optional_user),
    svc: OrderService = Depends(get_service),
):
    """
    Orders a single product without going through the cart. Works for guests.
    """
    try:
        return svc.buy_now(user, payload.product_id, payload.quantity, payload.shipping)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: ProfileModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(user)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: ProfileModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order(user, order_id)
    except SERVICE_ERRORS as e:
        raise http_error(e)
