# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_change_feed,
    require_admin,
    profile_from_token,
    http_error,
    SERVICE_ERRORS,
)
from storefront.data.database import get_db
from storefront.domain.schemas import (
    CategoryIn,
    CategoryOut,
    OrderOut,
    OrderStatusIn,
    ProductIn,
    ProductOut,
    ProductUpdate,
    ProfileOut,
    StatsOut,
    StoreSettingsIn,
    StoreSettingsOut,
)
from storefront.services.admin_service import AdminService
from storefront.services.change_feed import ChangeFeed
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])
protected = [Depends(require_admin)]


def get_service(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)):
    return AdminService(db, feed)


# dashboard

@router.get("/stats", response_model=StatsOut, dependencies=protected)
def stats(svc: AdminService = Depends(get_service)):
    return svc.stats()


def _stats_frame(svc: AdminService, db: Session) -> dict:
    # rows changed in other sessions
    db.expire_all()
    return StatsOut.model_validate(svc.stats(), from_attributes=True).model_dump(mode="json")


@router.websocket("/ws/stats")
async def stats_stream(
    websocket: WebSocket,
    token: str | None = Query(None),
    db: Session = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Pushes dashboard stats on connect and again after every change notification.
    Stats queries run in the threadpool.
    """
    try:
        admin = profile_from_token(token, db)
    except HTTPException:
        admin = None

    if admin is None or not admin.is_admin():
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    svc = AdminService(db, feed)

    try:
        await websocket.send_json(await run_in_threadpool(_stats_frame, svc, db))
        async for event in feed.listen():
            logger.info(f"Stats refresh after {event.get('table')}/{event.get('event')}")
            await websocket.send_json(await run_in_threadpool(_stats_frame, svc, db))
    except WebSocketDisconnect:
        logger.info(f"Stats stream closed for admin {admin.id}")
        return
    except RedisError as e:
        logger.warning(f"Change feed unavailable, closing stats stream for admin {admin.id}: {e}")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.close()


# products

@router.get("/products", response_model=List[ProductOut], dependencies=protected)
def list_products(
    search: str | None = Query(None),
    svc: AdminService = Depends(get_service),
):
    return svc.list_products(search)


@router.post("/products", response_model=ProductOut, status_code=201, dependencies=protected)
def create_product(payload: ProductIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.create_product(payload)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.patch("/products/{product_id}", response_model=ProductOut, dependencies=protected)
def update_product(product_id: int, payload: ProductUpdate, svc: AdminService = Depends(get_service)):
    try:
        return svc.update_product(product_id, payload)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("/products/{product_id}", status_code=204, dependencies=protected)
def delete_product(product_id: int, svc: AdminService = Depends(get_service)):
    try:
        svc.delete_product(product_id)
    except SERVICE_ERRORS as e:
        raise http_error(e)


# categories

@router.get("/categories", response_model=List[CategoryOut], dependencies=protected)
def list_categories(svc: AdminService = Depends(get_service)):
    return svc.list_categories()


@router.post("/categories", response_model=CategoryOut, status_code=201, dependencies=protected)
def create_category(payload: CategoryIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.create_category(payload)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.put("/categories/{category_id}", response_model=CategoryOut, dependencies=protected)
def update_category(category_id: int, payload: CategoryIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.update_category(category_id, payload)
    except SERVICE_ERRORS as e:
        raise http_error(e)


@router.delete("/categories/{category_id}", status_code=204, dependencies=protected)
def delete_category(category_id: int, svc: AdminService = Depends(get_service)):
    try:
        svc.delete_category(category_id)
    except SERVICE_ERRORS as e:
        raise http_error(e)


# orders

@router.get("/orders", response_model=List[OrderOut], dependencies=protected)
def list_orders(svc: AdminService = Depends(get_service)):
    return svc.list_orders()


@router.patch("/orders/{order_id}/status", response_model=OrderOut, dependencies=protected)
def update_order_status(order_id: int, payload: OrderStatusIn, svc: AdminService = Depends(get_service)):
    try:
        return svc.update_order_status(order_id, payload.status)
    except SERVICE_ERRORS as e:
        raise http_error(e)


# customers

@router.get("/customers", response_model=List[ProfileOut], dependencies=protected)
def list_customers(svc: AdminService = Depends(get_service)):
    return svc.list_customers()


# settings

@router.get("/settings", response_model=StoreSettingsOut, dependencies=protected)
def get_settings(svc: AdminService = Depends(get_service)):
    return svc.get_settings()


@router.put("/settings", response_model=StoreSettingsOut, dependencies=protected)
def update_settings(payload: StoreSettingsIn, svc: AdminService = Depends(get_service)):
    return svc.update_settings(payload)
