# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from storefront.api.deps import get_change_feed, get_current_user
from storefront.data.database import get_db
from storefront.data.models.profile import ProfileModel
from storefront.domain.schemas import SignupIn, LoginIn, TokenOut, ProfileOut
from storefront.services.auth_service import AuthService
from storefront.services.change_feed import ChangeFeed

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(db: Session = Depends(get_db), feed: ChangeFeed = Depends(get_change_feed)):
    return AuthService(db, feed)


@router.post("/signup", response_model=ProfileOut, status_code=201)
def signup(payload: SignupIn, svc: AuthService = Depends(get_service)):
    try:
        return svc.signup(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, svc: AuthService = Depends(get_service)):
    try:
        return {"access_token": svc.login(payload.email, payload.password)}
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/token", response_model=TokenOut, include_in_schema=False)
def token(form: OAuth2PasswordRequestForm = Depends(), svc: AuthService = Depends(get_service)):
    """
    OAuth2 password flow for the interactive docs; the username field carries the email.
    """
    try:
        return {"access_token": svc.login(form.username, form.password)}
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.get("/me", response_model=ProfileOut)
def me(user: ProfileModel = Depends(get_current_user)):
    return user
