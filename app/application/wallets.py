"""
Wallet use cases - business logic for wallet operations
"""
import re
from decimal import Decimal
from sqlalchemy.orm import Session

from app.application.common import DomainError, get_owned
from app.domain.wallet import WALLET_TYPES, WALLET_TYPE_CASH
from app.infrastructure.db.models import (
    WalletModel, TransactionModel, ScheduledPaymentModel, Gam3eyaPaymentModel,
)


class WalletValidationError(DomainError):
    """Wallet business rule violation"""
    pass


def _validate_type(wallet_type: str) -> None:
    if wallet_type not in WALLET_TYPES:
        raise WalletValidationError(
            f"Invalid wallet type: {wallet_type}. Use one of: {', '.join(WALLET_TYPES)}"
        )


def _validate_currency(currency: str) -> str:
    currency = currency.strip().upper()
    # Strictly 3 latin letters (EGP, USD, SAR)
    if not re.fullmatch(r"[A-Z]{3}", currency):
        raise WalletValidationError(f"Invalid currency code: «{currency}»")
    return currency


class CreateWalletUseCase:
    """
    Use case: create a wallet

    The opening balance is stored as is; cash and savings wallets cannot
    start below zero.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        wallet_type: str = WALLET_TYPE_CASH,
        balance: Decimal = Decimal("0"),
        currency: str = "EGP",
        icon: str | None = None,
        color: str | None = None,
    ) -> int:
        """
        Create a wallet

        Args:
            user_id: owner
            name: display name
            wallet_type: cash, bank, savings, gam3eya or custom
            balance: opening balance
            currency: ISO code

        Returns:
            id of the new wallet
        """
        name = name.strip()
        if not name:
            raise WalletValidationError("Wallet name is required")
        _validate_type(wallet_type)
        currency = _validate_currency(currency)

        if balance < 0 and wallet_type in ("cash", "savings"):
            raise WalletValidationError(
                f"A {wallet_type} wallet cannot start with a negative balance"
            )

        wallet = WalletModel(
            user_id=user_id,
            name=name,
            type=wallet_type,
            balance=balance,
            currency=currency,
            icon=icon,
            color=color,
        )
        self.db.add(wallet)
        self.db.flush()
        self.db.commit()
        return wallet.id


class UpdateWalletUseCase:
    """
    Use case: edit a wallet

    The balance may be overwritten directly (manual correction).
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, wallet_id: int, user_id: int, **changes) -> None:
        wallet = get_owned(self.db, WalletModel, wallet_id, user_id, "Wallet")

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise WalletValidationError("Wallet name is required")
            wallet.name = name
        if changes.get("type") is not None:
            _validate_type(changes["type"])
            wallet.type = changes["type"]
        if changes.get("balance") is not None:
            wallet.balance = changes["balance"]
        if changes.get("currency") is not None:
            wallet.currency = _validate_currency(changes["currency"])
        if "icon" in changes:
            wallet.icon = changes["icon"]
        if "color" in changes:
            wallet.color = changes["color"]
        self.db.commit()


class DeleteWalletUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, wallet_id: int, user_id: int) -> None:
        wallet = get_owned(self.db, WalletModel, wallet_id, user_id, "Wallet")

        for model in (TransactionModel, ScheduledPaymentModel, Gam3eyaPaymentModel):
            in_use = self.db.query(model.id).filter(model.wallet_id == wallet_id).first()
            if in_use:
                raise WalletValidationError(
                    "Wallet has transactions, scheduled payments or gam3eya payments and cannot be deleted"
                )

        self.db.delete(wallet)
        self.db.commit()


def list_wallets(db: Session, user_id: int) -> list[WalletModel]:
    return db.query(WalletModel).filter(
        WalletModel.user_id == user_id
    ).order_by(WalletModel.created_at.asc(), WalletModel.id.asc()).all()
