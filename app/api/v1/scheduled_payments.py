"""
Scheduled payment API endpoints
"""
from datetime import date as date_type
from decimal import Decimal
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.schemas import PositiveMoney
from app.application.common import get_owned
from app.application.scheduled_payments import (
    CreateScheduledPaymentUseCase, UpdateScheduledPaymentUseCase, DeleteScheduledPaymentUseCase,
    ToggleScheduledPaymentUseCase, ProcessDueScheduledPaymentsUseCase, PayScheduledPaymentNowUseCase,
    list_scheduled_payments,
)
from app.infrastructure.db.models import User, ScheduledPaymentModel


router = APIRouter(prefix="/api/v1/scheduled-payments", tags=["scheduled-payments"])


# === Request/Response models ===

class CreateScheduledPaymentRequest(BaseModel):
    title: str
    amount: PositiveMoney
    date: date_type
    wallet_id: int
    category_id: int
    recurring: str = "none"  # none, daily, weekly, monthly, yearly


class UpdateScheduledPaymentRequest(BaseModel):
    title: str | None = None
    amount: PositiveMoney | None = None
    date: date_type | None = None
    wallet_id: int | None = None
    category_id: int | None = None
    recurring: str | None = None
    completed: bool | None = None


class ScheduledPaymentResponse(BaseModel):
    id: int
    title: str
    amount: Decimal
    date: date_type
    wallet_id: int
    category_id: int
    recurring: str
    completed: bool


class ProcessDueResponse(BaseModel):
    processed_payments: int
    created_transactions: list[int]
    failed_payment_ids: list[int]


class PayNowResponse(BaseModel):
    transaction_id: int
    payment: ScheduledPaymentResponse


def _to_response(p: ScheduledPaymentModel) -> ScheduledPaymentResponse:
    return ScheduledPaymentResponse(
        id=p.id,
        title=p.title,
        amount=p.amount,
        date=p.date,
        wallet_id=p.wallet_id,
        category_id=p.category_id,
        recurring=p.recurring,
        completed=p.completed,
    )


def _load(db: Session, payment_id: int, user_id: int) -> ScheduledPaymentResponse:
    return _to_response(get_owned(db, ScheduledPaymentModel, payment_id, user_id, "Scheduled payment"))


# === Endpoints ===

@router.get("/", response_model=list[ScheduledPaymentResponse])
def get_scheduled_payments(
    include_completed: bool = True,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_to_response(p) for p in list_scheduled_payments(db, user.id, include_completed)]


@router.post("/", response_model=ScheduledPaymentResponse, status_code=201)
def create_scheduled_payment(
    req: CreateScheduledPaymentRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    payment_id = CreateScheduledPaymentUseCase(db).execute(
        user_id=user.id,
        title=req.title,
        amount=req.amount,
        due_date=req.date,
        wallet_id=req.wallet_id,
        category_id=req.category_id,
        recurring=req.recurring,
    )
    return _load(db, payment_id, user.id)


@router.post("/process-due", response_model=ProcessDueResponse)
def process_due(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Book everything that is due now (the scheduler does the same every few minutes)"""
    result = ProcessDueScheduledPaymentsUseCase(db).execute(user.id)
    return ProcessDueResponse(
        processed_payments=result.processed_payments,
        created_transactions=result.created_transactions,
        failed_payment_ids=result.failed_payment_ids,
    )


@router.get("/{payment_id}", response_model=ScheduledPaymentResponse)
def get_scheduled_payment(payment_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _load(db, payment_id, user.id)


@router.put("/{payment_id}", response_model=ScheduledPaymentResponse)
def update_scheduled_payment(
    payment_id: int,
    req: UpdateScheduledPaymentRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True)
    if "date" in changes:
        changes["due_date"] = changes.pop("date")
    UpdateScheduledPaymentUseCase(db).execute(payment_id, user.id, **changes)
    return _load(db, payment_id, user.id)


@router.delete("/{payment_id}")
def delete_scheduled_payment(payment_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteScheduledPaymentUseCase(db).execute(payment_id, user.id)
    return {"status": "deleted"}


@router.post("/{payment_id}/toggle-complete", response_model=ScheduledPaymentResponse)
def toggle_complete(payment_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    ToggleScheduledPaymentUseCase(db).execute(payment_id, user.id)
    return _load(db, payment_id, user.id)


@router.post("/{payment_id}/pay-now", response_model=PayNowResponse)
def pay_now(payment_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    transaction_id = PayScheduledPaymentNowUseCase(db).execute(payment_id, user.id)
    return PayNowResponse(transaction_id=transaction_id, payment=_load(db, payment_id, user.id))
