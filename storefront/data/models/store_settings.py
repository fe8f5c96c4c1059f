from sqlalchemy import Column, Integer, String, Text, Boolean

from storefront.data.database import Base


class StoreSettingsModel(Base):
    """Single-row table behind the admin "General" settings tab."""

    __tablename__ = "store_settings"

    id = Column(Integer, primary_key=True)
    store_name = Column(String(120), nullable=False, default="Storefront")
    store_description = Column(Text, nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(30), nullable=True)

    currency = Column(String(3), nullable=False, default="INR")
    low_stock_threshold = Column(Integer, nullable=False, default=10)
    notify_on_new_order = Column(Boolean, nullable=False, default=True)
