"""
Transaction API endpoints
"""
from datetime import date as date_type
from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.schemas import PositiveMoney
from app.application.common import get_owned
from app.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    TransactionFilters, list_transactions,
)
from app.infrastructure.db.models import User, TransactionModel, CategoryModel


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


# === Request/Response models ===

class CreateTransactionRequest(BaseModel):
    amount: PositiveMoney
    type: str  # income, expense
    category_id: int
    wallet_id: int
    description: str = ""
    date: date_type | None = None  # default: today
    receipt_url: str | None = None


class UpdateTransactionRequest(BaseModel):
    amount: PositiveMoney | None = None
    type: str | None = None
    category_id: int | None = None
    wallet_id: int | None = None
    description: str | None = None
    date: date_type | None = None
    receipt_url: str | None = None


class TransactionResponse(BaseModel):
    id: int
    amount: Decimal
    type: str
    category_id: int
    category_name: str | None = None
    wallet_id: int
    description: str
    date: date_type
    receipt_url: str | None = None
    scheduled_payment_id: int | None = None


class TransactionPage(BaseModel):
    items: list[TransactionResponse]
    total: int
    page: int
    page_size: int


def _to_response(tx: TransactionModel, category_name: str | None) -> TransactionResponse:
    return TransactionResponse(
        id=tx.id,
        amount=tx.amount,
        type=tx.type,
        category_id=tx.category_id,
        category_name=category_name,
        wallet_id=tx.wallet_id,
        description=tx.description,
        date=tx.date,
        receipt_url=tx.receipt_url,
        scheduled_payment_id=tx.scheduled_payment_id,
    )


def _load(db: Session, transaction_id: int, user_id: int) -> TransactionResponse:
    tx = get_owned(db, TransactionModel, transaction_id, user_id, "Transaction")
    category = db.query(CategoryModel).filter(CategoryModel.id == tx.category_id).first()
    return _to_response(tx, category.name if category else None)


# === Endpoints ===

@router.get("/", response_model=TransactionPage)
def get_transactions(
    type: str | None = None,
    wallet_id: int | None = None,
    category_id: int | None = None,
    date_from: date_type | None = None,
    date_to: date_type | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Transaction feed, newest first, with filters and pagination"""
    filters = TransactionFilters(
        transaction_type=type,
        wallet_id=wallet_id,
        category_id=category_id,
        date_from=date_from,
        date_to=date_to,
        search=search,
    )
    rows, total = list_transactions(db, user.id, filters, page, page_size)
    return TransactionPage(
        items=[_to_response(tx, name) for tx, name in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/", response_model=TransactionResponse, status_code=201)
def create_transaction(
    req: CreateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record income/expense; the wallet balance and budgets move with it"""
    transaction_id = CreateTransactionUseCase(db).execute(
        user_id=user.id,
        wallet_id=req.wallet_id,
        category_id=req.category_id,
        amount=req.amount,
        transaction_type=req.type,
        description=req.description,
        tx_date=req.date,
        receipt_url=req.receipt_url,
    )
    return _load(db, transaction_id, user.id)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(transaction_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _load(db, transaction_id, user.id)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    req: UpdateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True)
    # request field names -> use case argument names
    if "type" in changes:
        changes["transaction_type"] = changes.pop("type")
    if "date" in changes:
        changes["tx_date"] = changes.pop("date")

    UpdateTransactionUseCase(db).execute(transaction_id, user.id, **changes)
    return _load(db, transaction_id, user.id)


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete and give the amount back to (or take it from) the wallet"""
    DeleteTransactionUseCase(db).execute(transaction_id, user.id)
    return {"status": "deleted"}
