# storefront/repos/product_repo.py
from sqlalchemy import select, func, delete, update
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # products

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .options(joinedload(ProductModel.category))
            .where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def list_products(self, active_only: bool = True, search: str | None = None) -> list[ProductModel]:
        stmt = select(ProductModel).options(joinedload(ProductModel.category))
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if search:
            stmt = stmt.where(ProductModel.name.icontains(search, autoescape=True))
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars())

    def list_featured(self, limit: int) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .options(joinedload(ProductModel.category))
                .where(ProductModel.is_active.is_(True), ProductModel.is_featured.is_(True))
                .order_by(ProductModel.id)
                .limit(limit)
            ).scalars()
        )

    def list_low_stock(self, threshold: int) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.is_active.is_(True), ProductModel.stock <= threshold)
                .order_by(ProductModel.stock, ProductModel.id)
            ).scalars()
        )

    def reserve_stock(self, product_id: int, quantity: int) -> bool:
        # conditional decrement; False when the row no longer has enough stock
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock >= quantity)
            .values(stock=ProductModel.stock - quantity)
        )
        return result.rowcount == 1

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        # product leaves every cart together with the row itself
        self.db.execute(delete(CartItemModel).where(CartItemModel.product_id == product.id))
        self.db.delete(product)
        self.db.commit()

    # categories

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(func.lower(CategoryModel.name) == name.lower())
        ).scalar_one_or_none()

    def get_category_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())

    def count_products_in_category(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(ProductModel.category_id == category_id)
        ).scalar_one()

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()

    def commit(self):
        self.db.commit()
