# storefront/services/order_service.py
from decimal import Decimal
from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.data.models.profile import ProfileModel
from storefront.domain.schemas import ShippingIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.settings_repo import SettingsRepo
from storefront.services.cart_service import CartService
from storefront.services.change_feed import ChangeFeed
from storefront.services.notification_service import NotificationService
from storefront.utils.errors import NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Checkout and order tracking, kept apart from CartService.
    """

    def __init__(self, db: Session, feed: ChangeFeed, notifier: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.settings = SettingsRepo(db)
        self.carts = CartService(db)
        self.feed = feed
        self.notifier = notifier or NotificationService()

    def checkout_cart(self, user: ProfileModel, shipping: ShippingIn) -> OrderModel:
        """
        Use case: place an order for everything in the user's cart.

        1. validates the shipping details
        2. snapshots prices and decrements stock
        3. creates the order and its items
        4. clears the cart, publishes the change and notifies (async)
        """
        shipping.validate_details()

        cart = self.carts.ensure_cart(user)
        items = self.carts.repo.get_cart_items(cart.id)
        if not items:
            raise ValueError("Your cart is empty")

        order = self._place_order(user, shipping, ((i.product, i.quantity) for i in items))
        self.carts.repo.clear_items(cart.id)
        self.repo.commit()

        self._after_order(order, user)
        return self.get_order(user, order.id)

    def buy_now(self, user: ProfileModel | None, product_id: int, quantity: int, shipping: ShippingIn) -> OrderModel:
        """
        Use case: order a single product straight from its page; the cart is untouched.
        Guests may buy now, their order has no user.
        """
        shipping.validate_details()

        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")

        order = self._place_order(user, shipping, [(product, quantity)])
        self.repo.commit()

        self._after_order(order, user)
        return self.repo.get_order(order.id)

    def _place_order(
        self,
        user: ProfileModel | None,
        shipping: ShippingIn,
        lines: Iterable[Tuple[ProductModel, int]],
    ) -> OrderModel:
        order = OrderModel(
            user_id=user.id if user else None,
            status="pending",
            total_amount=Decimal("0.00"),
            shipping_address={
                "name": shipping.name,
                "phone": shipping.phone,
                "address": shipping.address,
                "pincode": shipping.pincode,
            },
        )

        total = Decimal("0.00")
        try:
            for product, quantity in lines:
                # the in-memory stock may be stale; the UPDATE re-checks the row
                if quantity > product.stock or not self.products.reserve_stock(product.id, quantity):
                    raise ValueError(f"Only {product.stock} of {product.name} in stock")

                total += product.price * quantity
                order.items.append(
                    OrderItemModel(
                        product_id=product.id,
                        quantity=quantity,
                        price_at_purchase=product.price,
                    )
                )

            order.total_amount = total
            self.repo.add_order(order)
        except Exception:
            self.repo.rollback()
            raise

        return order

    def _after_order(self, order: OrderModel, user: ProfileModel | None) -> None:
        logger.info(f"Order {order.id} placed, total {order.total_amount}, items {len(order.items)}")
        self.feed.publish("orders", "INSERT", order.id)
        if self.settings.get_settings().notify_on_new_order:
            self.notifier.send_order_notification(order.id, user.email if user else None)

    def list_orders(self, user: ProfileModel) -> list[OrderModel]:
        return self.repo.list_orders_for_user(user.id)

    def get_order(self, user: ProfileModel, order_id: int) -> OrderModel:
        """
        Use case: order details (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user.id:
            raise PermissionError("You do not have access to this order")

        return order
