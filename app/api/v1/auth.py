"""
Authentication and profile endpoints
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.users import (
    RegisterUserUseCase, LoginUseCase, UpdateProfileUseCase, ChangePasswordUseCase,
)
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request/Response models ===

class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    preferred_language: str = "en"


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    preferred_language: str | None = None  # en, ar
    currency: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    preferred_language: str
    currency: str
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        preferred_language=user.preferred_language,
        currency=user.currency,
        created_at=user.created_at,
    )


# === Endpoints ===

@router.post("/register", response_model=AuthResponse, status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    """Sign up; the new user gets the default categories"""
    user, token = RegisterUserUseCase(db).execute(
        name=req.name,
        email=req.email,
        password=req.password,
        preferred_language=req.preferred_language,
    )
    return AuthResponse(user=_to_response(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user, token = LoginUseCase(db).execute(email=req.email, password=req.password)
    return AuthResponse(user=_to_response(user), token=token)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return _to_response(user)


@router.patch("/me", response_model=UserResponse)
def update_profile(
    req: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    updated = UpdateProfileUseCase(db).execute(user.id, **req.model_dump(exclude_unset=True))
    return _to_response(updated)


@router.post("/change-password")
def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ChangePasswordUseCase(db).execute(
        user_id=user.id,
        current_password=req.current_password,
        new_password=req.new_password,
    )
    return {"status": "password_changed"}
