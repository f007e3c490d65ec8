"""
Gam3eya (rotating savings group) API endpoints
"""
from datetime import date as date_type
from decimal import Decimal
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.schemas import PositiveMoney
from app.application.common import get_owned
from app.application.gam3eya import (
    CreateGam3eyaUseCase, UpdateGam3eyaUseCase, DeleteGam3eyaUseCase,
    MakeGam3eyaPaymentUseCase, ReceiveGam3eyaPayoutUseCase,
    Gam3eyaView, build_gam3eya_view, list_gam3eyas, list_gam3eya_payments,
)
from app.infrastructure.db.models import User, Gam3eyaModel, Gam3eyaPaymentModel
from app.utils.dates import today_local


router = APIRouter(prefix="/api/v1/gam3eyas", tags=["gam3eyas"])


# === Request/Response models ===

class CreateGam3eyaRequest(BaseModel):
    name: str
    contribution_amount: PositiveMoney
    members: int
    start_date: date_type
    total_amount: PositiveMoney | None = None  # default: contribution * members
    total_cycles: int | None = None  # default: members
    end_date: date_type | None = None
    my_turn: int | None = None
    is_admin: bool = False


class UpdateGam3eyaRequest(BaseModel):
    name: str | None = None
    contribution_amount: PositiveMoney | None = None
    total_amount: PositiveMoney | None = None
    members: int | None = None
    total_cycles: int | None = None
    start_date: date_type | None = None
    end_date: date_type | None = None
    next_payment_date: date_type | None = None
    current_cycle: int | None = None
    my_turn: int | None = None
    is_admin: bool | None = None
    received_payout: bool | None = None


class Gam3eyaMoneyRequest(BaseModel):
    wallet_id: int
    date: date_type | None = None  # default: today


class Gam3eyaResponse(BaseModel):
    id: int
    name: str
    total_amount: Decimal
    contribution_amount: Decimal
    members: int
    start_date: date_type
    end_date: date_type
    current_cycle: int
    total_cycles: int
    is_admin: bool
    next_payment_date: date_type
    my_turn: int | None
    received_payout: bool
    is_completed: bool
    paid_cycles: list[int]
    is_payment_due: bool
    is_my_turn_to_receive: bool
    progress_percent: int


class Gam3eyaPaymentResponse(BaseModel):
    id: int
    gam3eya_id: int
    wallet_id: int
    amount: Decimal
    date: date_type
    cycle: int
    type: str  # payment, payout


def _to_response(view: Gam3eyaView) -> Gam3eyaResponse:
    g = view.gam3eya
    return Gam3eyaResponse(
        id=g.id,
        name=g.name,
        total_amount=g.total_amount,
        contribution_amount=g.contribution_amount,
        members=g.members,
        start_date=g.start_date,
        end_date=g.end_date,
        current_cycle=g.current_cycle,
        total_cycles=g.total_cycles,
        is_admin=g.is_admin,
        next_payment_date=g.next_payment_date,
        my_turn=g.my_turn,
        received_payout=g.received_payout,
        is_completed=g.is_completed,
        paid_cycles=view.paid_cycles,
        is_payment_due=view.is_payment_due,
        is_my_turn_to_receive=view.is_my_turn_to_receive,
        progress_percent=view.progress_percent,
    )


def _payment_to_response(p: Gam3eyaPaymentModel) -> Gam3eyaPaymentResponse:
    return Gam3eyaPaymentResponse(
        id=p.id,
        gam3eya_id=p.gam3eya_id,
        wallet_id=p.wallet_id,
        amount=p.amount,
        date=p.date,
        cycle=p.cycle,
        type=p.type,
    )


def _load(db: Session, gam3eya_id: int, user_id: int) -> Gam3eyaResponse:
    g = get_owned(db, Gam3eyaModel, gam3eya_id, user_id, "Gam3eya")
    return _to_response(build_gam3eya_view(db, g, today_local()))


# === Endpoints ===

@router.get("/", response_model=list[Gam3eyaResponse])
def get_gam3eyas(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Active groups first, by next payment date"""
    return [_to_response(v) for v in list_gam3eyas(db, user.id)]


@router.post("/", response_model=Gam3eyaResponse, status_code=201)
def create_gam3eya(
    req: CreateGam3eyaRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    gam3eya_id = CreateGam3eyaUseCase(db).execute(user_id=user.id, **req.model_dump())
    return _load(db, gam3eya_id, user.id)


@router.get("/{gam3eya_id}", response_model=Gam3eyaResponse)
def get_gam3eya(gam3eya_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _load(db, gam3eya_id, user.id)


@router.put("/{gam3eya_id}", response_model=Gam3eyaResponse)
def update_gam3eya(
    gam3eya_id: int,
    req: UpdateGam3eyaRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdateGam3eyaUseCase(db).execute(gam3eya_id, user.id, **req.model_dump(exclude_unset=True))
    return _load(db, gam3eya_id, user.id)


@router.delete("/{gam3eya_id}")
def delete_gam3eya(gam3eya_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteGam3eyaUseCase(db).execute(gam3eya_id, user.id)
    return {"status": "deleted"}


@router.get("/{gam3eya_id}/payments", response_model=list[Gam3eyaPaymentResponse])
def get_gam3eya_payments(gam3eya_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Contribution/payout ledger, newest first"""
    return [_payment_to_response(p) for p in list_gam3eya_payments(db, gam3eya_id, user.id)]


@router.post("/{gam3eya_id}/pay", response_model=Gam3eyaResponse)
def pay_contribution(
    gam3eya_id: int,
    req: Gam3eyaMoneyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Pay this cycle's contribution from a wallet"""
    MakeGam3eyaPaymentUseCase(db).execute(gam3eya_id, user.id, req.wallet_id, req.date)
    return _load(db, gam3eya_id, user.id)


@router.post("/{gam3eya_id}/payout", response_model=Gam3eyaResponse)
def receive_payout(
    gam3eya_id: int,
    req: Gam3eyaMoneyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Receive the pot into a wallet (only on my turn)"""
    ReceiveGam3eyaPayoutUseCase(db).execute(gam3eya_id, user.id, req.wallet_id, req.date)
    return _load(db, gam3eya_id, user.id)
