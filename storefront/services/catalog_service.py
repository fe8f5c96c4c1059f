# storefront/services/catalog_service.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.category import CategoryModel
from storefront.repos.product_repo import ProductRepo
from storefront.utils.errors import NotFoundError
from storefront.utils.settings import FEATURED_LIMIT


def category_matches(category: CategoryModel | None, slug: str) -> bool:
    """Exact slug match, or the category name containing the slug with its first dash as a space."""
    if category is None:
        return False
    term = slug.replace("-", " ", 1).lower()
    return category.slug == slug or term in category.name.lower()


class CatalogService:
    """Read-only storefront queries: home, listing and product page."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_categories(self) -> list[CategoryModel]:
        return self.repo.list_categories()

    def list_products(self, category: str | None = None, search: str | None = None) -> list[ProductModel]:
        products = self.repo.list_products(active_only=True, search=(search or "").strip() or None)
        if category:
            products = [p for p in products if category_matches(p.category, category)]
        return products

    def featured_products(self, limit: int | None = None) -> list[ProductModel]:
        return self.repo.list_featured(limit or FEATURED_LIMIT)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return product
