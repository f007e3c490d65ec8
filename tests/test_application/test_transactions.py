"""
Tests for Transaction use cases: wallet balance and budget bookkeeping
"""
from datetime import date
from decimal import Decimal

import pytest

from app.application.budgets import CreateBudgetUseCase
from app.application.common import NotFoundError
from app.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    TransactionValidationError, TransactionFilters, list_transactions,
)
from app.application.wallets import CreateWalletUseCase
from app.infrastructure.db.models import WalletModel, BudgetModel, TransactionModel


def _balance(db, wallet_id) -> Decimal:
    db.expire_all()
    return db.get(WalletModel, wallet_id).balance


def test_income_increases_balance(db_session, sample_user_id, wallet_id, salary_id, today):
    CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, salary_id, Decimal("500.25"), "income", "March salary", today=today,
    )
    assert _balance(db_session, wallet_id) == Decimal("1500.25")


def test_expense_decreases_balance_and_may_go_negative(db_session, sample_user_id, wallet_id, food_id, today):
    CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("1200"), "expense", today=today,
    )
    assert _balance(db_session, wallet_id) == Decimal("-200")


def test_date_defaults_to_today(db_session, sample_user_id, wallet_id, food_id, today):
    tx_id = CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("1"), "expense", today=today,
    )
    assert db_session.get(TransactionModel, tx_id).date == today


def test_invalid_input_is_rejected(db_session, sample_user_id, wallet_id, food_id, salary_id):
    uc = CreateTransactionUseCase(db_session)
    with pytest.raises(TransactionValidationError):
        uc.execute(sample_user_id, wallet_id, food_id, Decimal("0"), "expense")
    with pytest.raises(TransactionValidationError):
        uc.execute(sample_user_id, wallet_id, food_id, Decimal("10"), "transfer")
    # salary is an income category
    with pytest.raises(TransactionValidationError):
        uc.execute(sample_user_id, wallet_id, salary_id, Decimal("10"), "expense")
    assert _balance(db_session, wallet_id) == Decimal("1000")


def test_foreign_wallet_is_not_found(db_session, sample_user_id, food_id):
    other_wallet = CreateWalletUseCase(db_session).execute(user_id=sample_user_id + 1, name="Other")
    with pytest.raises(NotFoundError):
        CreateTransactionUseCase(db_session).execute(
            sample_user_id, other_wallet, food_id, Decimal("10"), "expense",
        )


def test_expense_moves_budget_spent(db_session, sample_user_id, wallet_id, food_id, today):
    budget_id = CreateBudgetUseCase(db_session).execute(
        sample_user_id, food_id, Decimal("300"), today=today,
    )
    uc = CreateTransactionUseCase(db_session)
    uc.execute(sample_user_id, wallet_id, food_id, Decimal("120"), "expense", tx_date=today, today=today)
    # previous month, outside the window
    uc.execute(sample_user_id, wallet_id, food_id, Decimal("50"), "expense", tx_date=date(2026, 2, 20), today=today)

    assert db_session.get(BudgetModel, budget_id).spent == Decimal("120")


def test_update_reverts_old_effect(db_session, sample_user_id, wallet_id, food_id, salary_id, today):
    second = CreateWalletUseCase(db_session).execute(user_id=sample_user_id, name="Cash", balance=Decimal("100"))
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("300"), today=today)
    tx_id = CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("200"), "expense", tx_date=today, today=today,
    )

    UpdateTransactionUseCase(db_session).execute(
        tx_id, sample_user_id, today=today,
        wallet_id=second, category_id=salary_id, transaction_type="income", amount=Decimal("50"),
    )

    assert _balance(db_session, wallet_id) == Decimal("1000")
    assert _balance(db_session, second) == Decimal("150")
    assert db_session.get(BudgetModel, budget_id).spent == Decimal("0")


def test_update_amount_only(db_session, sample_user_id, wallet_id, food_id, today):
    tx_id = CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("200"), "expense", today=today,
    )
    UpdateTransactionUseCase(db_session).execute(tx_id, sample_user_id, today=today, amount=Decimal("75.50"))
    assert _balance(db_session, wallet_id) == Decimal("924.50")


def test_delete_restores_balance_and_budget(db_session, sample_user_id, wallet_id, food_id, today):
    budget_id = CreateBudgetUseCase(db_session).execute(sample_user_id, food_id, Decimal("300"), today=today)
    tx_id = CreateTransactionUseCase(db_session).execute(
        sample_user_id, wallet_id, food_id, Decimal("80"), "expense", tx_date=today, today=today,
    )
    DeleteTransactionUseCase(db_session).execute(tx_id, sample_user_id, today=today)

    assert _balance(db_session, wallet_id) == Decimal("1000")
    assert db_session.get(BudgetModel, budget_id).spent == Decimal("0")
    assert db_session.get(TransactionModel, tx_id) is None


def test_list_filters_and_pagination(db_session, sample_user_id, wallet_id, food_id, salary_id, today):
    uc = CreateTransactionUseCase(db_session)
    for day in range(1, 6):
        uc.execute(sample_user_id, wallet_id, food_id, Decimal("10"), "expense",
                   f"Lunch {day}", tx_date=date(2026, 3, day), today=today)
    uc.execute(sample_user_id, wallet_id, salary_id, Decimal("900"), "income",
               "Salary", tx_date=date(2026, 3, 10), today=today)

    rows, total = list_transactions(db_session, sample_user_id, page=1, page_size=4)
    assert total == 6
    assert len(rows) == 4
    assert rows[0][0].description == "Salary"
    assert rows[0][1] == "salary"

    rows, total = list_transactions(
        db_session, sample_user_id,
        TransactionFilters(transaction_type="expense", date_from=date(2026, 3, 2), date_to=date(2026, 3, 3)),
    )
    assert total == 2

    rows, total = list_transactions(db_session, sample_user_id, TransactionFilters(search="lunch 4"))
    assert total == 1
    assert rows[0][0].date == date(2026, 3, 4)
