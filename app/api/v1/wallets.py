"""
Wallet API endpoints
"""
from decimal import Decimal
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.api.schemas import Money
from app.application.common import get_owned
from app.application.wallets import (
    CreateWalletUseCase, UpdateWalletUseCase, DeleteWalletUseCase, list_wallets,
)
from app.infrastructure.db.models import User, WalletModel


router = APIRouter(prefix="/api/v1/wallets", tags=["wallets"])


# === Request/Response models ===

class CreateWalletRequest(BaseModel):
    name: str
    type: str = "cash"  # cash, bank, savings, gam3eya, custom
    balance: Money = Decimal("0")
    currency: str | None = None  # defaults to the user's currency
    icon: str | None = None
    color: str | None = None


class UpdateWalletRequest(BaseModel):
    name: str | None = None
    type: str | None = None
    balance: Money | None = None
    currency: str | None = None
    icon: str | None = None
    color: str | None = None


class WalletResponse(BaseModel):
    id: int
    name: str
    type: str
    balance: Decimal
    currency: str
    icon: str | None
    color: str | None


def _to_response(w: WalletModel) -> WalletResponse:
    return WalletResponse(
        id=w.id,
        name=w.name,
        type=w.type,
        balance=w.balance,
        currency=w.currency,
        icon=w.icon,
        color=w.color,
    )


# === Endpoints ===

@router.get("/", response_model=list[WalletResponse])
def get_wallets(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """All wallets of the user"""
    return [_to_response(w) for w in list_wallets(db, user.id)]


@router.post("/", response_model=WalletResponse, status_code=201)
def create_wallet(
    req: CreateWalletRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    wallet_id = CreateWalletUseCase(db).execute(
        user_id=user.id,
        name=req.name,
        wallet_type=req.type,
        balance=req.balance,
        currency=req.currency or user.currency,
        icon=req.icon,
        color=req.color,
    )
    return _to_response(get_owned(db, WalletModel, wallet_id, user.id, "Wallet"))


@router.get("/{wallet_id}", response_model=WalletResponse)
def get_wallet(wallet_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _to_response(get_owned(db, WalletModel, wallet_id, user.id, "Wallet"))


@router.put("/{wallet_id}", response_model=WalletResponse)
def update_wallet(
    wallet_id: int,
    req: UpdateWalletRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    UpdateWalletUseCase(db).execute(wallet_id, user.id, **req.model_dump(exclude_unset=True))
    return _to_response(get_owned(db, WalletModel, wallet_id, user.id, "Wallet"))


@router.delete("/{wallet_id}")
def delete_wallet(wallet_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteWalletUseCase(db).execute(wallet_id, user.id)
    return {"status": "deleted"}
