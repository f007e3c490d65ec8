"""
Category API endpoints
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.common import get_owned
from app.application.categories import (
    CreateCategoryUseCase, UpdateCategoryUseCase, DeleteCategoryUseCase, list_categories,
)
from app.domain.category import CATEGORY_TYPES
from app.infrastructure.db.models import User, CategoryModel


router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


# === Request/Response models ===

class CreateCategoryRequest(BaseModel):
    name: str
    type: str  # income, expense, both
    icon: str | None = None
    color: str | None = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in CATEGORY_TYPES:
            raise ValueError(f"type must be income, expense or both, got: {v}")
        return v


class UpdateCategoryRequest(BaseModel):
    name: str | None = None
    type: str | None = None
    icon: str | None = None
    color: str | None = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    type: str
    icon: str | None
    color: str | None
    is_custom: bool


def _to_response(c: CategoryModel) -> CategoryResponse:
    return CategoryResponse(
        id=c.id,
        name=c.name,
        type=c.type,
        icon=c.icon,
        color=c.color,
        is_custom=c.is_custom,
    )


# === Endpoints ===

@router.get("/", response_model=list[CategoryResponse])
def get_categories(
    type: str | None = None,  # filter: income / expense / both
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Defaults first, then custom categories, alphabetically"""
    return [_to_response(c) for c in list_categories(db, user.id, type)]


@router.post("/", response_model=CategoryResponse, status_code=201)
def create_category(
    req: CreateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    category_id = CreateCategoryUseCase(db).execute(
        user_id=user.id,
        name=req.name,
        category_type=req.type,
        icon=req.icon,
        color=req.color,
    )
    return _to_response(get_owned(db, CategoryModel, category_id, user.id, "Category"))


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    req: UpdateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdateCategoryUseCase(db).execute(category_id, user.id, **req.model_dump(exclude_unset=True))
    return _to_response(get_owned(db, CategoryModel, category_id, user.id, "Category"))


@router.delete("/{category_id}")
def delete_category(category_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteCategoryUseCase(db).execute(category_id, user.id)
    return {"status": "deleted"}
