# storefront/services/admin_service.py
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.order import OrderModel, ORDER_STATUSES
from storefront.data.models.product import ProductModel
from storefront.data.models.profile import ProfileModel
from storefront.data.models.store_settings import StoreSettingsModel
from storefront.domain.schemas import CategoryIn, ProductIn, ProductUpdate, StoreSettingsIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.profile_repo import ProfileRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.services.change_feed import ChangeFeed
from storefront.utils.validators import slugify
from storefront.utils.errors import NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

RECENT_ORDERS_LIMIT = 5


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class AdminService:
    """
    Admin console use cases: dashboard, products, categories, orders,
    customers and store settings. Every write is published on the change feed.
    """

    def __init__(self, db: Session, feed: ChangeFeed):
        self.db = db
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)
        self.profiles = ProfileRepo(db)
        self.settings = SettingsRepo(db)
        self.feed = feed

    # dashboard

    def stats(self) -> Dict[str, Any]:
        threshold = self.settings.get_settings().low_stock_threshold

        return {
            "total_sales": self.orders.total_sales(),
            "total_orders": self.orders.count_orders(),
            "total_products": self.products.count_products(),
            "active_users": self.profiles.count_profiles(),
            "recent_orders": self.orders.list_orders(limit=RECENT_ORDERS_LIMIT),
            "low_stock": self.products.list_low_stock(threshold),
        }

    # products

    def list_products(self, search: str | None = None) -> list[ProductModel]:
        return self.products.list_products(active_only=False, search=(search or "").strip() or None)

    def create_product(self, payload: ProductIn) -> ProductModel:
        self._require_category(payload.category_id)

        product = ProductModel(
            name=payload.name.strip(),
            price=payload.price,
            stock=payload.stock,
            description=_blank_to_none(payload.description),
            image_url=_blank_to_none(payload.image_url),
            category_id=payload.category_id,
            is_featured=payload.is_featured,
            is_active=True,
        )
        created = self.products.add_product(product)

        logger.info(f"Product {created.id} created: {created.name}")
        self.feed.publish("products", "INSERT", created.id)
        return self.products.get_product(created.id)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self._require_product(product_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("category_id") is not None:
            self._require_category(changes["category_id"])

        for field in ("description", "image_url"):
            if field in changes:
                changes[field] = _blank_to_none(changes[field])
        if changes.get("name"):
            changes["name"] = changes["name"].strip()

        for field, value in changes.items():
            # explicit nulls are only meaningful for the optional text fields
            if value is None and field not in ("description", "image_url"):
                continue
            setattr(product, field, value)

        self.products.commit()

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        self.feed.publish("products", "UPDATE", product_id)
        return self.products.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        product = self._require_product(product_id)

        if self.orders.count_items_for_product(product_id) > 0:
            raise RuntimeError("Product has orders and cannot be deleted; deactivate it instead")

        self.products.delete_product(product)

        logger.info(f"Product {product_id} deleted")
        self.feed.publish("products", "DELETE", product_id)

    # categories

    def list_categories(self) -> list[CategoryModel]:
        return self.products.list_categories()

    def create_category(self, payload: CategoryIn) -> CategoryModel:
        name = payload.name.strip()
        slug = slugify(payload.slug or name)
        if not slug:
            raise ValueError("Category name must contain letters or digits")

        if self.products.get_category_by_name(name) or self.products.get_category_by_slug(slug):
            raise RuntimeError("Category already exists")

        try:
            created = self.products.add_category(CategoryModel(name=name, slug=slug))
        except IntegrityError:
            self.db.rollback()
            raise RuntimeError("Category already exists")

        logger.info(f"Category {created.id} created: {created.slug}")
        self.feed.publish("categories", "INSERT", created.id)
        return created

    def update_category(self, category_id: int, payload: CategoryIn) -> CategoryModel:
        category = self._require_category(category_id)
        name = payload.name.strip()
        slug = slugify(payload.slug or name)

        clash = self.products.get_category_by_name(name) or self.products.get_category_by_slug(slug)
        if clash and clash.id != category.id:
            raise RuntimeError("Category already exists")

        category.name = name
        category.slug = slug
        self.products.commit()

        self.feed.publish("categories", "UPDATE", category_id)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self._require_category(category_id)

        if self.products.count_products_in_category(category_id) > 0:
            raise RuntimeError("Category has products and cannot be deleted")

        self.products.delete_category(category)
        self.feed.publish("categories", "DELETE", category_id)

    # orders

    def list_orders(self) -> list[OrderModel]:
        return self.orders.list_orders()

    def update_order_status(self, order_id: int, status: str) -> OrderModel:
        status = (status or "").strip().lower()
        if status not in ORDER_STATUSES:
            raise ValueError(f"Invalid status, expected one of: {', '.join(ORDER_STATUSES)}")

        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if order.status == status:
            return order

        if order.status == "cancelled":
            raise RuntimeError("Cancelled orders cannot be reopened")

        if status == "cancelled":
            # cancelled goods go back on the shelf
            for item in order.items:
                if item.product is not None:
                    item.product.stock += item.quantity

        previous = order.status
        order.status = status
        self.orders.commit()

        logger.info(f"Order {order_id} status {previous} -> {status}")
        self.feed.publish("orders", "UPDATE", order_id)
        return self.orders.get_order(order_id)

    # customers

    def list_customers(self) -> list[ProfileModel]:
        return self.profiles.list_profiles()

    # settings

    def get_settings(self) -> StoreSettingsModel:
        return self.settings.get_settings()

    def update_settings(self, payload: StoreSettingsIn) -> StoreSettingsModel:
        settings = self.settings.get_settings()

        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is None and field in ("store_name", "currency", "low_stock_threshold", "notify_on_new_order"):
                continue
            setattr(settings, field, value)

        self.settings.commit()
        self.feed.publish("store_settings", "UPDATE", settings.id)
        return settings

    def _require_product(self, product_id: int) -> ProductModel:
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _require_category(self, category_id: int) -> CategoryModel:
        category = self.products.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category
