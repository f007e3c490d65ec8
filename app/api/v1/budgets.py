"""
Budget API endpoints
"""
from datetime import date as date_type
from decimal import Decimal
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.schemas import PositiveMoney
from app.application.budgets import (
    CreateBudgetUseCase, UpdateBudgetUseCase, DeleteBudgetUseCase, RecalculateBudgetsUseCase,
    BudgetView, list_budgets,
)
from app.application.common import NotFoundError
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/budgets", tags=["budgets"])


class CreateBudgetRequest(BaseModel):
    category_id: int
    amount: PositiveMoney
    period: str = "monthly"  # monthly, weekly, yearly, custom
    start_date: date_type | None = None
    end_date: date_type | None = None


class UpdateBudgetRequest(BaseModel):
    category_id: int | None = None
    amount: PositiveMoney | None = None
    period: str | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None


class BudgetResponse(BaseModel):
    id: int
    category_id: int
    category_name: str
    amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: int
    is_over_budget: bool
    period: str
    start_date: date_type | None
    end_date: date_type | None
    window_start: date_type
    window_end: date_type


def _to_response(view: BudgetView) -> BudgetResponse:
    b = view.budget
    return BudgetResponse(
        id=b.id,
        category_id=b.category_id,
        category_name=view.category_name,
        amount=b.amount,
        spent=b.spent,
        remaining=view.remaining,
        percentage=view.percentage,
        is_over_budget=view.is_over_budget,
        period=b.period,
        start_date=b.start_date,
        end_date=b.end_date,
        window_start=view.window_start,
        window_end=view.window_end,
    )


def _load(db: Session, budget_id: int, user_id: int) -> BudgetResponse:
    for view in list_budgets(db, user_id):
        if view.budget.id == budget_id:
            return _to_response(view)
    raise NotFoundError(f"Budget #{budget_id} not found")


@router.get("/", response_model=list[BudgetResponse])
def get_budgets(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [_to_response(v) for v in list_budgets(db, user.id)]


@router.post("/", response_model=BudgetResponse, status_code=201)
def create_budget(
    req: CreateBudgetRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a budget; spent starts from the expenses already in its window"""
    budget_id = CreateBudgetUseCase(db).execute(
        user_id=user.id,
        category_id=req.category_id,
        amount=req.amount,
        period=req.period,
        start_date=req.start_date,
        end_date=req.end_date,
    )
    return _load(db, budget_id, user.id)


@router.post("/recalculate")
def recalculate_budgets(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Rebuild spent of every budget from the transactions table"""
    count = RecalculateBudgetsUseCase(db).execute(user.id)
    return {"status": "recalculated", "budgets": count}


@router.put("/{budget_id}", response_model=BudgetResponse)
def update_budget(
    budget_id: int,
    req: UpdateBudgetRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdateBudgetUseCase(db).execute(budget_id, user.id, **req.model_dump(exclude_unset=True))
    return _load(db, budget_id, user.id)


@router.delete("/{budget_id}")
def delete_budget(budget_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteBudgetUseCase(db).execute(budget_id, user.id)
    return {"status": "deleted"}
