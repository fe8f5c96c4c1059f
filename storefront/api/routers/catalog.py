# storefront/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductOut
from storefront.services.catalog_service import CatalogService
from storefront.utils.errors import NotFoundError

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_service(db: Session = Depends(get_db)):
    return CatalogService(db)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(svc: CatalogService = Depends(get_service)):
    return svc.list_categories()


@router.get("/products", response_model=List[ProductOut])
def list_products(
    category: str | None = Query(None, description="Category slug"),
    search: str | None = Query(None, description="Case-insensitive name search"),
    svc: CatalogService = Depends(get_service),
):
    return svc.list_products(category=category, search=search)


@router.get("/featured", response_model=List[ProductOut])
def featured_products(
    limit: int | None = Query(None, gt=0, le=50),
    svc: CatalogService = Depends(get_service),
):
    return svc.featured_products(limit)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: CatalogService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
