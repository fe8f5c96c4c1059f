# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models import CategoryModel, ProductModel, ProfileModel, StoreSettingsModel
from storefront.services.auth_service import hash_password
from storefront.utils.settings import ADMIN_EMAIL, ADMIN_PASSWORD
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("Raw Coconuts", "raw-coconuts"),
    ("Coconut Oil", "coconut-oil"),
    ("Coir Products", "coir-products"),
]

# (name, category slug, price, stock, featured)
PRODUCTS = [
    ("Tender Coconut", "raw-coconuts", "45.00", 120, True),
    ("Dry Copra Coconut", "raw-coconuts", "38.00", 80, False),
    ("Cold Pressed Coconut Oil 1L", "coconut-oil", "420.00", 40, True),
    ("Virgin Coconut Oil 500ml", "coconut-oil", "310.00", 25, True),
    ("Coir Door Mat", "coir-products", "250.00", 8, True),
    ("Coir Rope 10m", "coir-products", "120.00", 60, False),
]


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # only seed an empty database
        if db.query(CategoryModel).first():
            logger.info("Database already seeded, skipping")
            return

        categories = {}
        for name, slug in CATEGORIES:
            categories[slug] = CategoryModel(name=name, slug=slug)
            db.add(categories[slug])
        db.flush()

        for name, slug, price, stock, featured in PRODUCTS:
            db.add(
                ProductModel(
                    name=name,
                    price=Decimal(price),
                    stock=stock,
                    category_id=categories[slug].id,
                    is_featured=featured,
                    is_active=True,
                )
            )

        db.add(StoreSettingsModel(store_name="Storefront", currency="INR", low_stock_threshold=10))
        db.add(
            ProfileModel(
                email=ADMIN_EMAIL,
                password_hash=hash_password(ADMIN_PASSWORD),
                full_name="Admin User",
                role="admin",
            )
        )
        db.commit()

        logger.info(f"Seeded {len(CATEGORIES)} categories, {len(PRODUCTS)} products and admin {ADMIN_EMAIL}")
    finally:
        db.close()


if __name__ == "__main__":
    from storefront.main import init_db

    init_db()
    seed()
