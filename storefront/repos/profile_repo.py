# storefront/repos/profile_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.profile import ProfileModel


class ProfileRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, profile_id: int) -> ProfileModel | None:
        return self.db.get(ProfileModel, profile_id)

    def get_by_email(self, email: str) -> ProfileModel | None:
        return self.db.execute(
            select(ProfileModel).where(func.lower(ProfileModel.email) == email.lower())
        ).scalar_one_or_none()

    def create_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def list_profiles(self) -> list[ProfileModel]:
        return list(
            self.db.execute(
                select(ProfileModel).order_by(ProfileModel.created_at.desc(), ProfileModel.id.desc())
            ).scalars()
        )

    def count_profiles(self) -> int:
        return self.db.execute(select(func.count(ProfileModel.id))).scalar_one()
