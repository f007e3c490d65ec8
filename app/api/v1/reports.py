"""
Report API endpoints (dashboard numbers and charts)
"""
from datetime import date as date_type
from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.reports import (
    financial_summary, expenses_by_category, monthly_income_expense, wallet_balances,
)
from app.infrastructure.db.models import User


router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


class SummaryResponse(BaseModel):
    total_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    net: Decimal


class CategoryTotalResponse(BaseModel):
    category_id: int
    category_name: str
    total: Decimal


class MonthTotalsResponse(BaseModel):
    year: int
    month: int
    income: Decimal
    expenses: Decimal


class WalletBalanceResponse(BaseModel):
    id: int
    name: str
    type: str
    balance: Decimal
    currency: str


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    date_from: date_type | None = None,
    date_to: date_type | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    s = financial_summary(db, user.id, date_from, date_to)
    return SummaryResponse(
        total_balance=s.total_balance,
        total_income=s.total_income,
        total_expenses=s.total_expenses,
        net=s.net,
    )


@router.get("/expenses-by-category", response_model=list[CategoryTotalResponse])
def get_expenses_by_category(
    date_from: date_type | None = None,
    date_to: date_type | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        CategoryTotalResponse(category_id=c.category_id, category_name=c.category_name, total=c.total)
        for c in expenses_by_category(db, user.id, date_from, date_to)
    ]


@router.get("/monthly", response_model=list[MonthTotalsResponse])
def get_monthly(
    months: int = Query(6, ge=1, le=36),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        MonthTotalsResponse(year=m.year, month=m.month, income=m.income, expenses=m.expenses)
        for m in monthly_income_expense(db, user.id, months)
    ]


@router.get("/wallet-balances", response_model=list[WalletBalanceResponse])
def get_wallet_balances(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [
        WalletBalanceResponse(id=w.id, name=w.name, type=w.type, balance=w.balance, currency=w.currency)
        for w in wallet_balances(db, user.id)
    ]
