"""
Tests for Budget use cases
"""
from datetime import date
from decimal import Decimal

import pytest

from app.application.budgets import (
    CreateBudgetUseCase, UpdateBudgetUseCase, DeleteBudgetUseCase, RecalculateBudgetsUseCase,
    BudgetValidationError, list_budgets,
)
from app.application.transactions import CreateTransactionUseCase
from app.infrastructure.db.models import BudgetModel


def _spend(db, user_id, wallet_id, category_id, amount, tx_date, today):
    CreateTransactionUseCase(db).execute(
        user_id, wallet_id, category_id, Decimal(amount), "expense", tx_date=tx_date, today=today,
    )


def test_new_budget_counts_existing_expenses(db_session, sample_user_id, wallet_id, food_id, today):
    _spend(db_session, sample_user_id, wallet_id, food_id, "40", date(2026, 3, 2), today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "60", date(2026, 3, 9), today)

    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("80"), today=today)

    assert db_session.get(BudgetModel, budget_id).spent == Decimal("100")


def test_income_category_is_rejected(db_session, sample_user_id, salary_id):
    with pytest.raises(BudgetValidationError):
        CreateBudgetUseCase(db_session).execute(sample_user_id, salary_id, Decimal("100"))


def test_custom_period_needs_dates(db_session, sample_user_id, food_id):
    uc = CreateBudgetUseCase(db_session)
    with pytest.raises(BudgetValidationError):
        uc.execute(sample_user_id, food_id, Decimal("100"), period="custom")
    with pytest.raises(BudgetValidationError):
        uc.execute(sample_user_id, food_id, Decimal("100"), period="custom",
                   start_date=date(2026, 3, 10), end_date=date(2026, 3, 1))
    with pytest.raises(BudgetValidationError):
        uc.execute(sample_user_id, food_id, Decimal("100"), period="quarterly")


def test_view_reports_remaining_and_overrun(db_session, sample_user_id, wallet_id, food_id, today):
    CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("80"), today=today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "100", today, today)

    [view] = list_budgets(db_session, sample_user_id, today)
    assert view.category_name == "food"
    assert view.remaining == Decimal("-20")
    assert view.percentage == 125
    assert view.is_over_budget
    assert view.window_start == date(2026, 3, 1)
    assert view.window_end == date(2026, 3, 31)


def test_update_window_recomputes_spent(db_session, sample_user_id, wallet_id, food_id, today):
    _spend(db_session, sample_user_id, wallet_id, food_id, "30", date(2026, 2, 10), today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "20", today, today)
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("100"), today=today)
    assert db_session.get(BudgetModel, budget_id).spent == Decimal("20")

    UpdateBudgetUseCase(db_session).execute(
        budget_id, sample_user_id, today=today,
        period="custom", start_date=date(2026, 2, 1), end_date=date(2026, 3, 31),
    )
    assert db_session.get(BudgetModel, budget_id).spent == Decimal("50")


def test_recalculate_fixes_drift(db_session, sample_user_id, wallet_id, food_id, today):
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("100"), today=today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "25", today, today)

    db_session.get(BudgetModel, budget_id).spent = Decimal("999")
    db_session.commit()

    assert RecalculateBudgetsUseCase(db_session).execute(sample_user_id, today) == 1
    assert db_session.get(BudgetModel, budget_id).spent == Decimal("25")


def test_delete_budget(db_session, sample_user_id, food_id):
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("100"))
    DeleteBudgetUseCase(db_session).execute(budget_id, sample_user_id)
    assert db_session.get(BudgetModel, budget_id) is None


def test_monthly_budget_starts_fresh_in_new_month(db_session, sample_user_id, wallet_id, food_id, today):
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("120"), today=today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "100", today, today)

    april = date(2026, 4, 2)
    _spend(db_session, sample_user_id, wallet_id, food_id, "50", april, april)

    budget = db_session.get(BudgetModel, budget_id)
    assert budget.spent == Decimal("50")
    assert budget.spent_window_start == date(2026, 4, 1)

    [view] = list_budgets(db_session, sample_user_id, april)
    assert view.window_start == date(2026, 4, 1)
    assert view.remaining == Decimal("70")
    assert not view.is_over_budget


def test_listing_rolls_window_without_new_expenses(db_session, sample_user_id, wallet_id, food_id, today):
    CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("80"), today=today)
    _spend(db_session, sample_user_id, wallet_id, food_id, "100", today, today)

    [view] = list_budgets(db_session, sample_user_id, date(2026, 4, 1))
    assert view.budget.spent == Decimal("0")
    assert view.percentage == 0
    assert not view.is_over_budget


def test_deleting_old_expense_after_rollover_leaves_new_window(db_session, sample_user_id, wallet_id, food_id, today):
    from app.application.transactions import DeleteTransactionUseCase

    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("120"), today=today)
    old_tx = CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("100"), "expense", tx_date=today, today=today,
    )
    april = date(2026, 4, 2)
    _spend(db_session, sample_user_id, wallet_id, food_id, "30", april, april)

    DeleteTransactionUseCase(db_session).execute(old_tx, sample_user_id, today=april)

    assert db_session.get(BudgetModel, budget_id).spent == Decimal("30")
