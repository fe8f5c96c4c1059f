# storefront/services/auth_service.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.profile import ProfileModel
from storefront.domain.schemas import SignupIn
from storefront.repos.profile_repo import ProfileRepo
from storefront.services.change_feed import ChangeFeed
from storefront.utils.settings import SECRET_KEY, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(profile: ProfileModel, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(profile.id), "role": profile.role, "exp": expire}
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    # jwt.ExpiredSignatureError / jwt.InvalidTokenError propagate to the caller
    return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])


class AuthService:
    def __init__(self, db: Session, feed: ChangeFeed):
        self.repo = ProfileRepo(db)
        self.db = db
        self.feed = feed

    def signup(self, payload: SignupIn) -> ProfileModel:
        if payload.password != payload.confirm_password:
            raise ValueError("Passwords do not match")

        if self.repo.get_by_email(payload.email):
            raise ValueError("An account with this email already exists")

        profile = ProfileModel(
            email=payload.email.lower(),
            password_hash=hash_password(payload.password),
            full_name=payload.full_name.strip(),
            phone=(payload.phone or "").strip() or None,
            role="customer",
        )

        try:
            created = self.repo.create_profile(profile)
        except IntegrityError:
            self.db.rollback()
            raise ValueError("An account with this email already exists")

        logger.info(f"Created profile {created.id} for {created.email}")
        self.feed.publish("profiles", "INSERT", created.id)
        return created

    def login(self, email: str, password: str) -> str:
        profile = self.repo.get_by_email(email)
        if not profile or not verify_password(password, profile.password_hash):
            raise PermissionError("Invalid email or password")

        logger.info(f"Profile {profile.id} signed in")
        return create_access_token(profile)

    def get_profile(self, profile_id: int) -> ProfileModel | None:
        return self.repo.get_profile(profile_id)
