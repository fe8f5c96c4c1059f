# storefront/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.profile import ProfileModel
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.retry import conflict_retry
from storefront.utils.errors import NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    One cart per user, created on first use.
    Query (get) only reads; commands (add, update, remove, clear) change items.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    def ensure_cart(self, user: ProfileModel) -> CartModel:
        try:
            return self._fetch_or_create(user)
        except IntegrityError as e:
            raise RuntimeError("Cart already exists but could not be loaded") from e

    @conflict_retry()
    def _fetch_or_create(self, user: ProfileModel) -> CartModel:
        cart = self.repo.get_cart_by_user(user.id)

        if cart:
            # older carts were created without the email
            if not cart.user_email and user.email:
                logger.info(f"Backfilling user_email for cart {cart.id}")
                self.repo.set_user_email(cart, user.email)
            return cart

        logger.info(f"Cart not found for user {user.id}, creating one")
        try:
            return self.repo.create_cart(CartModel(user_id=user.id, user_email=user.email))
        except IntegrityError:
            # unique user_id: a concurrent request created it first, the retry re-reads it
            self.repo.rollback()
            logger.warning(f"Cart for user {user.id} already exists (race condition), retrying fetch")
            raise

    #query
    def get_cart(self, user: ProfileModel) -> Dict[str, Any]:
        cart = self.ensure_cart(user)
        items = self.repo.get_cart_items(cart.id)
        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "items": items,
            "item_count": sum(i.quantity for i in items),
            "total": total,
        }

    #commands
    def add_item(self, user: ProfileModel, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")

        cart = self.ensure_cart(user)
        existing_item = self.repo.get_cart_item(cart.id, product_id)
        new_quantity = quantity + (existing_item.quantity if existing_item else 0)

        if new_quantity > product.stock:
            raise ValueError(f"Only {product.stock} of {product.name} in stock")

        if existing_item:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {new_quantity}"
            )
            existing_item.quantity = new_quantity
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        self.repo.commit()
        return self.get_cart(user)

    def update_quantity(self, user: ProfileModel, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        cart = self.ensure_cart(user)
        item = self._own_item(cart, item_id)

        if quantity > item.product.stock:
            raise ValueError(f"Only {item.product.stock} of {item.product.name} in stock")

        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return self.get_cart(user)

    def remove_item(self, user: ProfileModel, item_id: int) -> Dict[str, Any]:
        cart = self.ensure_cart(user)
        item = self._own_item(cart, item_id)

        self.repo.delete_cart_item(item)
        self.repo.commit()

        logger.info(f"Removed item {item_id} from cart {cart.id}")
        return self.get_cart(user)

    def clear_cart(self, user: ProfileModel) -> Dict[str, Any]:
        cart = self.ensure_cart(user)
        removed = self.repo.clear_items(cart.id)
        self.repo.commit()

        logger.info(f"Cleared {removed} item(s) from cart {cart.id}")
        return self.get_cart(user)

    def _own_item(self, cart: CartModel, item_id: int) -> CartItemModel:
        item = self.repo.get_item(item_id)
        # items from other carts look missing, not forbidden
        if not item or item.cart_id != cart.id:
            raise NotFoundError("Cart item not found")
        return item
