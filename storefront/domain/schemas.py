# storefront/domain/schemas.py
import json

from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.utils.validators import validate_phone, validate_pincode, validate_currency


# auth / profiles

class SignupIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileOut(BaseModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# catalog

class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CategoryRef(BaseModel):
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    stock: int
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: int
    category: Optional[CategoryRef] = None
    is_featured: bool
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductIn(BaseModel):
    """Admin product form."""

    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., gt=0, decimal_places=2)
    category_id: int = Field(..., gt=0)
    stock: int = Field(0, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    category_id: Optional[int] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None


# cart

class CartItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class CartQuantityIn(BaseModel):
    # < 1 is rejected by the service, not here, so the message matches the cart page
    quantity: int


class CartItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    product: ProductOut

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartItemOut]
    item_count: int
    total: Decimal


# checkout / orders

class ShippingIn(BaseModel):
    """Checkout form; every field is required."""

    name: str = ""
    phone: str = ""
    address: str = ""
    pincode: str = ""

    @field_validator("name", "phone", "address", "pincode", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    def missing_fields(self) -> List[str]:
        return [f for f in ("name", "phone", "address", "pincode") if not getattr(self, f)]

    def validate_details(self) -> None:
        if self.missing_fields():
            raise ValueError("Please fill in all required fields")
        validate_phone(self.phone)
        validate_pincode(self.pincode)


class CheckoutIn(BaseModel):
    shipping: ShippingIn


class BuyNowIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)
    shipping: ShippingIn


class OrderProductRef(BaseModel):
    name: str
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    price_at_purchase: Decimal
    product: Optional[OrderProductRef] = None

    model_config = ConfigDict(from_attributes=True)


class ShippingOut(BaseModel):
    name: str
    phone: str
    address: str
    pincode: str


class OrderOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    status: str
    total_amount: Decimal
    shipping_address: ShippingOut
    items: List[OrderItemOut] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("shipping_address", mode="before")
    @classmethod
    def parse_shipping(cls, v):
        # older rows kept the snapshot as a JSON string
        return json.loads(v) if isinstance(v, str) else v


class OrderStatusIn(BaseModel):
    status: str


# admin

class OrderSummary(BaseModel):
    id: int
    user_id: Optional[int] = None
    status: str
    total_amount: Decimal
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LowStockOut(BaseModel):
    id: int
    name: str
    stock: int

    model_config = ConfigDict(from_attributes=True)


class StatsOut(BaseModel):
    total_sales: Decimal
    total_orders: int
    total_products: int
    active_users: int
    recent_orders: List[OrderSummary]
    low_stock: List[LowStockOut]


class StoreSettingsOut(BaseModel):
    store_name: str
    store_description: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    currency: str
    low_stock_threshold: int
    notify_on_new_order: bool

    model_config = ConfigDict(from_attributes=True)


class StoreSettingsIn(BaseModel):
    store_name: Optional[str] = Field(None, min_length=1, max_length=120)
    store_description: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=30)
    currency: Optional[str] = None
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    notify_on_new_order: Optional[bool] = None

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v):
        return validate_currency(v) if v is not None else v
