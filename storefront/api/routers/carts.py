# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, http_error, SERVICE_ERRORS
from storefront.data.database import get_db
from storefront.data.models.profile import ProfileModel
from storefront.domain.schemas import CartItemIn, CartQuantityIn, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db)):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: ProfileModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.get_cart(user)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user: ProfileModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_item(user, payload.product_id, payload.quantity)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.patch("/items/{item_id}", response_model=CartOut)
def update_quantity(
    item_id: int,
    payload: CartQuantityIn,
    user: ProfileModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(user, item_id, payload.quantity)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: ProfileModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove_item(user, item_id)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("", response_model=CartOut)
def clear_cart(
    user: ProfileModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.clear_cart(user)
    except SERVICE_ERRORS as e:
        raise http_error(e)
