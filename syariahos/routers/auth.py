"""Auth router - registration, login, logout and current user."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from syariahos.core.deps import get_bearer_token, get_current_user, get_db
from syariahos.core.rate_limit import AUTH_LIMIT, limiter
from syariahos.db.models import User
from syariahos.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from syariahos.schemas.base import DataResponse, MessageResponse
from syariahos.schemas.user import UserRead
from syariahos.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_LIMIT)
def register(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account and return a bearer token."""
    user, token = auth_service.register(db, data)
    return {"message": "Registration successful", "token": token, "data": user}


@router.post("/login", response_model=TokenResponse)
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    result = auth_service.login(db, data.email, data.password)
    if result is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    user, token = result
    return {"message": "Login successful", "token": token, "data": user}


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str = Depends(get_bearer_token),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Revoke the token used for this request."""
    auth_service.logout(db, user, token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=DataResponse[UserRead])
def me(user: User = Depends(get_current_user)):
    return {"data": user}
