# storefront/repos/settings_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.store_settings import StoreSettingsModel


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> StoreSettingsModel:
        settings = self.db.execute(
            select(StoreSettingsModel).order_by(StoreSettingsModel.id).limit(1)
        ).scalar_one_or_none()

        # first read creates the row with defaults
        if settings is None:
            settings = StoreSettingsModel(
                store_name="Storefront",
                currency="INR",
                low_stock_threshold=10,
                notify_on_new_order=True,
            )
            self.db.add(settings)
            self.db.commit()
            self.db.refresh(settings)

        return settings

    def commit(self):
        self.db.commit()
