"""
Read-only financial reports for the dashboard and the reports page
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.domain.recurrence import add_months
from app.domain.transaction import TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE
from app.infrastructure.db.models import TransactionModel, WalletModel, CategoryModel
from app.utils.dates import today_local


@dataclass
class FinancialSummary:
    total_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expenses


@dataclass
class CategoryTotal:
    category_id: int
    category_name: str
    total: Decimal


@dataclass
class MonthTotals:
    year: int
    month: int
    income: Decimal
    expenses: Decimal


def _dec(value) -> Decimal:
    return Decimal(str(value or 0))


def _filtered(query, user_id: int, date_from: date | None, date_to: date | None):
    query = query.filter(TransactionModel.user_id == user_id)
    if date_from:
        query = query.filter(TransactionModel.date >= date_from)
    if date_to:
        query = query.filter(TransactionModel.date <= date_to)
    return query


def financial_summary(
    db: Session,
    user_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> FinancialSummary:
    """Balance over all wallets + income/expense totals for the range"""
    total_balance = db.query(func.sum(WalletModel.balance)).filter(
        WalletModel.user_id == user_id
    ).scalar()

    rows = _filtered(
        db.query(TransactionModel.type, func.sum(TransactionModel.amount)),
        user_id, date_from, date_to,
    ).group_by(TransactionModel.type).all()
    totals = {tx_type: _dec(total) for tx_type, total in rows}

    return FinancialSummary(
        total_balance=_dec(total_balance),
        total_income=totals.get(TRANSACTION_TYPE_INCOME, Decimal("0")),
        total_expenses=totals.get(TRANSACTION_TYPE_EXPENSE, Decimal("0")),
    )


def expenses_by_category(
    db: Session,
    user_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[CategoryTotal]:
    """Expense totals per category, largest first"""
    total = func.sum(TransactionModel.amount)
    rows = _filtered(
        db.query(CategoryModel.id, CategoryModel.name, total)
        .join(CategoryModel, CategoryModel.id == TransactionModel.category_id)
        .filter(TransactionModel.type == TRANSACTION_TYPE_EXPENSE),
        user_id, date_from, date_to,
    ).group_by(CategoryModel.id, CategoryModel.name).order_by(total.desc()).all()

    return [CategoryTotal(category_id=cid, category_name=name, total=_dec(t)) for cid, name, t in rows]


def monthly_income_expense(
    db: Session,
    user_id: int,
    months: int = 6,
    today: date | None = None,
) -> list[MonthTotals]:
    """
    Income and expenses per calendar month for the last `months` months
    (current month included), oldest first. Empty months are zeros.
    """
    today = today or today_local()
    first = add_months(date(today.year, today.month, 1), -(months - 1))

    buckets: dict[tuple[int, int], MonthTotals] = {}
    d = first
    for _ in range(months):
        buckets[(d.year, d.month)] = MonthTotals(d.year, d.month, Decimal("0"), Decimal("0"))
        d = add_months(d, 1)

    rows = _filtered(
        db.query(TransactionModel.date, TransactionModel.type, TransactionModel.amount),
        user_id, first, today,
    ).all()
    for tx_date, tx_type, amount in rows:
        bucket = buckets.get((tx_date.year, tx_date.month))
        if bucket is None:
            continue
        if tx_type == TRANSACTION_TYPE_INCOME:
            bucket.income += _dec(amount)
        else:
            bucket.expenses += _dec(amount)

    return list(buckets.values())


def wallet_balances(db: Session, user_id: int) -> list[WalletModel]:
    return db.query(WalletModel).filter(
        WalletModel.user_id == user_id
    ).order_by(WalletModel.balance.desc()).all()
