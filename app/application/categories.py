"""
Category use cases
"""
from sqlalchemy.orm import Session
from sqlalchemy import or_

from app.application.common import DomainError, get_owned
from app.domain.category import CATEGORY_TYPES, CATEGORY_TYPE_BOTH, DEFAULT_CATEGORIES, is_compatible
from app.domain.transaction import TRANSACTION_TYPE_EXPENSE
from app.infrastructure.db.models import (
    CategoryModel, TransactionModel, BudgetModel, ScheduledPaymentModel,
)


class CategoryValidationError(DomainError):
    pass


def _validate_type(category_type: str) -> None:
    if category_type not in CATEGORY_TYPES:
        raise CategoryValidationError(
            f"Invalid category type: {category_type}. Use income, expense or both"
        )


def _required_transaction_types(db: Session, category_id: int) -> set[str]:
    """Transaction types the rows referencing a category rely on"""
    required = {
        row.type for row in
        db.query(TransactionModel.type).filter(TransactionModel.category_id == category_id).distinct()
    }
    for model in (BudgetModel, ScheduledPaymentModel):
        if db.query(model.id).filter(model.category_id == category_id).first():
            required.add(TRANSACTION_TYPE_EXPENSE)
    return required


class EnsureDefaultCategoriesUseCase:
    """
    Use case: seed the default categories of a user

    Idempotent - categories that already exist by name are skipped.
    Defaults are not custom and cannot be changed or deleted.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, commit: bool = True) -> int:
        existing = {
            row.name for row in
            self.db.query(CategoryModel.name).filter(
                CategoryModel.user_id == user_id,
                CategoryModel.is_custom == False,
            ).all()
        }
        count = 0
        for name, category_type, icon in DEFAULT_CATEGORIES:
            if name in existing:
                continue
            self.db.add(CategoryModel(
                user_id=user_id,
                name=name,
                type=category_type,
                icon=icon,
                is_custom=False,
            ))
            count += 1
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return count


class CreateCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        category_type: str,
        icon: str | None = None,
        color: str | None = None,
    ) -> int:
        name = name.strip()
        if not name:
            raise CategoryValidationError("Category name is required")
        _validate_type(category_type)

        duplicate = self.db.query(CategoryModel).filter(
            CategoryModel.user_id == user_id,
            CategoryModel.name == name,
            CategoryModel.type == category_type,
        ).first()
        if duplicate:
            raise CategoryValidationError(f"Category «{name}» already exists")

        category = CategoryModel(
            user_id=user_id,
            name=name,
            type=category_type,
            icon=icon or "CreditCard",
            color=color,
            is_custom=True,
        )
        self.db.add(category)
        self.db.flush()
        self.db.commit()
        return category.id


class UpdateCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, category_id: int, user_id: int, **changes) -> None:
        category = get_owned(self.db, CategoryModel, category_id, user_id, "Category")
        if not category.is_custom:
            raise CategoryValidationError("Default categories cannot be changed")

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise CategoryValidationError("Category name is required")
            category.name = name
        if changes.get("type") is not None:
            _validate_type(changes["type"])
            blocked = sorted(
                tx_type for tx_type in _required_transaction_types(self.db, category_id)
                if not is_compatible(changes["type"], tx_type)
            )
            if blocked:
                self.db.rollback()
                raise CategoryValidationError(
                    f"Category is used by {', '.join(blocked)} records and cannot become {changes['type']}"
                )
            category.type = changes["type"]
        if "icon" in changes:
            category.icon = changes["icon"]
        if "color" in changes:
            category.color = changes["color"]
        self.db.commit()


class DeleteCategoryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, category_id: int, user_id: int) -> None:
        category = get_owned(self.db, CategoryModel, category_id, user_id, "Category")
        if not category.is_custom:
            raise CategoryValidationError("Default categories cannot be deleted")

        for model in (TransactionModel, BudgetModel, ScheduledPaymentModel):
            in_use = self.db.query(model.id).filter(model.category_id == category_id).first()
            if in_use:
                raise CategoryValidationError(
                    "Category is in use by transactions, budgets or scheduled payments"
                )

        self.db.delete(category)
        self.db.commit()


def list_categories(db: Session, user_id: int, category_type: str | None = None) -> list[CategoryModel]:
    """Categories of a user; a "both" category shows up under either type."""
    query = db.query(CategoryModel).filter(CategoryModel.user_id == user_id)
    if category_type:
        _validate_type(category_type)
        if category_type == CATEGORY_TYPE_BOTH:
            query = query.filter(CategoryModel.type == CATEGORY_TYPE_BOTH)
        else:
            query = query.filter(or_(
                CategoryModel.type == category_type,
                CategoryModel.type == CATEGORY_TYPE_BOTH,
            ))
    return query.order_by(CategoryModel.is_custom.asc(), CategoryModel.name.asc()).all()
