"""
Budget use cases + spent bookkeeping.

spent is stored on the budget row and moved by every expense transaction
that falls into the budget's window (see adjust_budgets_spent). It can always
be recomputed from the transactions table.

Rolling budgets (no explicit dates) remember which window spent belongs to in
spent_window_start. Once today leaves that window, sync_budget_windows
recomputes spent for the new one. Writers sync before applying deltas.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.application.common import DomainError, get_owned
from app.domain.budget import BUDGET_PERIODS, BUDGET_PERIOD_CUSTOM, budget_window
from app.domain.category import CATEGORY_TYPE_INCOME
from app.domain.transaction import TRANSACTION_TYPE_EXPENSE
from app.infrastructure.db.models import BudgetModel, CategoryModel, TransactionModel
from app.utils.dates import today_local


class BudgetValidationError(DomainError):
    pass


def _validate_dates(period: str, start_date: date | None, end_date: date | None) -> None:
    if period not in BUDGET_PERIODS:
        raise BudgetValidationError(
            f"Invalid period: {period}. Use one of: {', '.join(BUDGET_PERIODS)}"
        )
    if (start_date is None) != (end_date is None):
        raise BudgetValidationError("start_date and end_date must be given together")
    if period == BUDGET_PERIOD_CUSTOM and start_date is None:
        raise BudgetValidationError("A custom budget needs start_date and end_date")
    if start_date is not None and start_date > end_date:
        raise BudgetValidationError("start_date must be on or before end_date")


def compute_spent(db: Session, budget: BudgetModel, today: date) -> Decimal:
    """Sum of expenses in the budget's category and window"""
    start, end = budget_window(budget.period, budget.start_date, budget.end_date, today)
    total = db.query(func.coalesce(func.sum(TransactionModel.amount), 0)).filter(
        TransactionModel.user_id == budget.user_id,
        TransactionModel.category_id == budget.category_id,
        TransactionModel.type == TRANSACTION_TYPE_EXPENSE,
        TransactionModel.date >= start,
        TransactionModel.date <= end,
    ).scalar()
    return Decimal(str(total))


def refresh_spent(db: Session, budget: BudgetModel, today: date) -> None:
    budget.spent = compute_spent(db, budget, today)
    budget.spent_window_start = budget_window(
        budget.period, budget.start_date, budget.end_date, today
    )[0]


def sync_budget_windows(db: Session, user_id: int, today: date) -> int:
    """
    Recompute spent of budgets whose stored window is no longer current.

    Must run before the caller changes any transaction in this unit of work.
    Does not commit. Returns the number of budgets recomputed.
    """
    budgets = db.query(BudgetModel).filter(BudgetModel.user_id == user_id).all()

    synced = 0
    for budget in budgets:
        start, _ = budget_window(budget.period, budget.start_date, budget.end_date, today)
        if budget.spent_window_start == start:
            continue
        refresh_spent(db, budget, today)
        synced += 1
    return synced


def adjust_budgets_spent(
    db: Session,
    user_id: int,
    category_id: int,
    tx_date: date,
    delta: Decimal,
    today: date,
) -> int:
    """
    Move spent of every budget whose category and window cover an expense.

    Does not commit; runs inside the caller's unit of work, after
    sync_budget_windows. Returns the number of budgets touched.
    """
    budgets = db.query(BudgetModel).filter(
        BudgetModel.user_id == user_id,
        BudgetModel.category_id == category_id,
    ).all()

    touched = 0
    for budget in budgets:
        start, end = budget_window(budget.period, budget.start_date, budget.end_date, today)
        if not (start <= tx_date <= end):
            continue
        budget.spent = max(Decimal("0"), Decimal(budget.spent) + delta)
        touched += 1
    return touched


class CreateBudgetUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        category_id: int,
        amount: Decimal,
        period: str = "monthly",
        start_date: date | None = None,
        end_date: date | None = None,
        today: date | None = None,
    ) -> int:
        if amount <= 0:
            raise BudgetValidationError("Budget amount must be greater than zero")
        _validate_dates(period, start_date, end_date)

        category = get_owned(self.db, CategoryModel, category_id, user_id, "Category")
        if category.type == CATEGORY_TYPE_INCOME:
            raise BudgetValidationError("Budgets can only track expense categories")

        budget = BudgetModel(
            user_id=user_id,
            category_id=category_id,
            amount=amount,
            spent=Decimal("0"),
            period=period,
            start_date=start_date,
            end_date=end_date,
        )
        self.db.add(budget)
        self.db.flush()
        refresh_spent(self.db, budget, today or today_local())
        self.db.commit()
        return budget.id


class UpdateBudgetUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, budget_id: int, user_id: int, today: date | None = None, **changes) -> None:
        budget = get_owned(self.db, BudgetModel, budget_id, user_id, "Budget")

        if changes.get("category_id") is not None:
            category = get_owned(self.db, CategoryModel, changes["category_id"], user_id, "Category")
            if category.type == CATEGORY_TYPE_INCOME:
                raise BudgetValidationError("Budgets can only track expense categories")
            budget.category_id = category.id
        if changes.get("amount") is not None:
            if changes["amount"] <= 0:
                raise BudgetValidationError("Budget amount must be greater than zero")
            budget.amount = changes["amount"]

        period = changes.get("period") or budget.period
        start_date = changes["start_date"] if "start_date" in changes else budget.start_date
        end_date = changes["end_date"] if "end_date" in changes else budget.end_date
        _validate_dates(period, start_date, end_date)
        budget.period = period
        budget.start_date = start_date
        budget.end_date = end_date

        # Category or window may have moved
        refresh_spent(self.db, budget, today or today_local())
        self.db.commit()


class DeleteBudgetUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, budget_id: int, user_id: int) -> None:
        budget = get_owned(self.db, BudgetModel, budget_id, user_id, "Budget")
        self.db.delete(budget)
        self.db.commit()


class RecalculateBudgetsUseCase:
    """Use case: rebuild spent of all budgets of a user from transactions"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, today: date | None = None) -> int:
        today = today or today_local()
        budgets = self.db.query(BudgetModel).filter(BudgetModel.user_id == user_id).all()
        for budget in budgets:
            refresh_spent(self.db, budget, today)
        self.db.commit()
        return len(budgets)


@dataclass
class BudgetView:
    budget: BudgetModel
    category_name: str
    window_start: date
    window_end: date
    remaining: Decimal
    percentage: int
    is_over_budget: bool


def build_budget_view(budget: BudgetModel, category_name: str, today: date) -> BudgetView:
    amount = Decimal(budget.amount)
    spent = Decimal(budget.spent)
    start, end = budget_window(budget.period, budget.start_date, budget.end_date, today)
    percentage = int(round(spent / amount * 100)) if amount > 0 else 0
    return BudgetView(
        budget=budget,
        category_name=category_name,
        window_start=start,
        window_end=end,
        remaining=amount - spent,
        percentage=percentage,
        is_over_budget=spent > amount,
    )


def list_budgets(db: Session, user_id: int, today: date | None = None) -> list[BudgetView]:
    today = today or today_local()
    if sync_budget_windows(db, user_id, today):
        db.commit()
    rows = (
        db.query(BudgetModel, CategoryModel.name)
        .join(CategoryModel, CategoryModel.id == BudgetModel.category_id)
        .filter(BudgetModel.user_id == user_id)
        .order_by(BudgetModel.id.asc())
        .all()
    )
    return [build_budget_view(budget, name, today) for budget, name in rows]
