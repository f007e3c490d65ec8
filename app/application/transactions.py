"""
Transaction use cases - business logic for transaction operations

Every write keeps three things in one database transaction:
the transaction row, the wallet balance and the spent of matching budgets.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.application.budgets import adjust_budgets_spent, sync_budget_windows
from app.application.common import DomainError, get_owned
from app.domain.category import is_compatible
from app.domain.transaction import TRANSACTION_TYPES, TRANSACTION_TYPE_EXPENSE, balance_delta
from app.infrastructure.db.models import TransactionModel, WalletModel, CategoryModel
from app.utils.dates import today_local


class TransactionValidationError(DomainError):
    """Transaction business rule violation"""
    pass


def _apply_effect(
    db: Session,
    tx: TransactionModel,
    today: date,
    sign: int = 1,
) -> None:
    """
    Apply (sign=1) or revert (sign=-1) the effect of a transaction
    on its wallet and on the budgets of its category.
    """
    wallet = db.query(WalletModel).filter(
        WalletModel.id == tx.wallet_id,
        WalletModel.user_id == tx.user_id,
    ).first()
    if wallet is None:
        raise TransactionValidationError(f"Wallet #{tx.wallet_id} not found")

    amount = Decimal(tx.amount)
    wallet.balance = Decimal(wallet.balance) + sign * balance_delta(tx.type, amount)

    if tx.type == TRANSACTION_TYPE_EXPENSE:
        adjust_budgets_spent(
            db, tx.user_id, tx.category_id, tx.date, sign * amount, today
        )


class _TransactionWriter:
    def __init__(self, db: Session):
        self.db = db

    def _validate(
        self,
        user_id: int,
        wallet_id: int,
        category_id: int,
        amount: Decimal,
        transaction_type: str,
    ) -> None:
        if transaction_type not in TRANSACTION_TYPES:
            raise TransactionValidationError(
                f"Invalid transaction type: {transaction_type}. Use income or expense"
            )
        if amount <= 0:
            raise TransactionValidationError("Amount must be greater than zero")

        get_owned(self.db, WalletModel, wallet_id, user_id, "Wallet")
        category = get_owned(self.db, CategoryModel, category_id, user_id, "Category")
        if not is_compatible(category.type, transaction_type):
            raise TransactionValidationError(
                f"Category «{category.name}» cannot be used for {transaction_type} transactions"
            )


class CreateTransactionUseCase(_TransactionWriter):
    """
    Use case: record an income or expense

    Process:
    1. Validate wallet and category ownership
    2. Insert the transaction
    3. Move the wallet balance (income +, expense -)
    4. Move spent of matching budgets (expense only)
    5. Commit, or roll everything back
    """

    def execute(
        self,
        user_id: int,
        wallet_id: int,
        category_id: int,
        amount: Decimal,
        transaction_type: str,
        description: str = "",
        tx_date: date | None = None,
        receipt_url: str | None = None,
        scheduled_payment_id: int | None = None,
        today: date | None = None,
        commit: bool = True,
    ) -> int:
        """
        Returns:
            id of the created transaction

        With commit=False the caller owns the unit of work (the scheduled
        payments loop groups several writes into one commit).
        """
        today = today or today_local()
        self._validate(user_id, wallet_id, category_id, amount, transaction_type)

        tx = TransactionModel(
            user_id=user_id,
            wallet_id=wallet_id,
            category_id=category_id,
            amount=amount,
            type=transaction_type,
            description=(description or "").strip(),
            date=tx_date or today,
            receipt_url=receipt_url,
            scheduled_payment_id=scheduled_payment_id,
        )
        try:
            sync_budget_windows(self.db, user_id, today)
            self.db.add(tx)
            self.db.flush()
            _apply_effect(self.db, tx, today)
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except Exception:
            if commit:
                self.db.rollback()
            raise
        return tx.id


class UpdateTransactionUseCase(_TransactionWriter):
    """
    Use case: edit a transaction

    The old effect is reverted on the old wallet/budgets,
    then the new effect is applied.
    """

    def execute(self, transaction_id: int, user_id: int, today: date | None = None, **changes) -> None:
        today = today or today_local()
        tx = get_owned(self.db, TransactionModel, transaction_id, user_id, "Transaction")

        wallet_id = changes.get("wallet_id") or tx.wallet_id
        category_id = changes.get("category_id") or tx.category_id
        amount = changes["amount"] if changes.get("amount") is not None else Decimal(tx.amount)
        transaction_type = changes.get("transaction_type") or tx.type
        self._validate(user_id, wallet_id, category_id, amount, transaction_type)

        try:
            sync_budget_windows(self.db, user_id, today)
            _apply_effect(self.db, tx, today, sign=-1)

            tx.wallet_id = wallet_id
            tx.category_id = category_id
            tx.amount = amount
            tx.type = transaction_type
            if changes.get("description") is not None:
                tx.description = changes["description"].strip()
            if changes.get("tx_date") is not None:
                tx.date = changes["tx_date"]
            if "receipt_url" in changes:
                tx.receipt_url = changes["receipt_url"]
            self.db.flush()

            _apply_effect(self.db, tx, today)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class DeleteTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, user_id: int, today: date | None = None) -> None:
        today = today or today_local()
        tx = get_owned(self.db, TransactionModel, transaction_id, user_id, "Transaction")
        try:
            sync_budget_windows(self.db, user_id, today)
            _apply_effect(self.db, tx, today, sign=-1)
            self.db.delete(tx)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


# ============================================================================
# Read side
# ============================================================================


@dataclass
class TransactionFilters:
    transaction_type: str | None = None
    wallet_id: int | None = None
    category_id: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    search: str | None = None


def list_transactions(
    db: Session,
    user_id: int,
    filters: TransactionFilters | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[tuple[TransactionModel, str]], int]:
    """
    Newest first page of (transaction, category_name) + total count.
    """
    filters = filters or TransactionFilters()
    if filters.transaction_type and filters.transaction_type not in TRANSACTION_TYPES:
        raise TransactionValidationError(f"Invalid transaction type: {filters.transaction_type}")
    if page < 1 or page_size < 1:
        raise TransactionValidationError("page and page_size must be positive")

    query = (
        db.query(TransactionModel, CategoryModel.name)
        .join(CategoryModel, CategoryModel.id == TransactionModel.category_id)
        .filter(TransactionModel.user_id == user_id)
    )
    if filters.transaction_type:
        query = query.filter(TransactionModel.type == filters.transaction_type)
    if filters.wallet_id:
        query = query.filter(TransactionModel.wallet_id == filters.wallet_id)
    if filters.category_id:
        query = query.filter(TransactionModel.category_id == filters.category_id)
    if filters.date_from:
        query = query.filter(TransactionModel.date >= filters.date_from)
    if filters.date_to:
        query = query.filter(TransactionModel.date <= filters.date_to)
    if filters.search:
        query = query.filter(
            func.lower(TransactionModel.description).contains(filters.search.strip().lower())
        )

    total = query.count()
    rows = (
        query.order_by(TransactionModel.date.desc(), TransactionModel.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
        .all()
    )
    return [(tx, name) for tx, name in rows], total
