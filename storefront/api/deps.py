# storefront/api/deps.py
from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.profile import ProfileModel
from storefront.services.auth_service import decode_access_token
from storefront.services.change_feed import ChangeFeed
from storefront.utils.errors import NotFoundError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

# service errors to HTTP: missing, forbidden, invalid input, conflict
_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (PermissionError, 403),
    (ValueError, 400),
    (RuntimeError, 409),
)

SERVICE_ERRORS = tuple(cls for cls, _ in _STATUS_BY_ERROR)


def http_error(e: Exception) -> HTTPException:
    for cls, status_code in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=500, detail="Internal error")


@lru_cache
def get_change_feed() -> ChangeFeed:
    return ChangeFeed()


def profile_from_token(token: str | None, db: Session) -> ProfileModel | None:
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        profile_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token payload")

    profile = db.get(ProfileModel, profile_id)
    if profile is None:
        raise HTTPException(status_code=401, detail="Account not found")
    return profile


def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> ProfileModel | None:
    # a stale or broken token falls back to a guest
    try:
        return profile_from_token(token, db)
    except HTTPException:
        return None


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> ProfileModel:
    profile = profile_from_token(token, db)
    if profile is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


def require_admin(user: ProfileModel = Depends(get_current_user)) -> ProfileModel:
    if not user.is_admin():
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
