# import every model so SQLAlchemy registers it in Base.metadata

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.profile import ProfileModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, ORDER_STATUSES
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.store_settings import StoreSettingsModel

__all__ = [
    "CategoryModel",
    "ProductModel",
    "ProfileModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "ORDER_STATUSES",
    "OrderItemModel",
    "StoreSettingsModel",
]
