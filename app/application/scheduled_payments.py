"""
Scheduled payments: CRUD and the auto-processing loop.

A scheduled payment turns into a real expense transaction on its due date.
process_due walks every due payment of a user, books one transaction per
missed occurrence and moves the payment to its next date (or completes a
one-off payment). Each payment is its own unit of work: one failure is
logged and rolled back without stopping the others.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy.orm import Session

from app.application.common import DomainError, get_owned
from app.application.transactions import CreateTransactionUseCase
from app.config import get_settings
from app.domain.category import is_compatible
from app.domain.recurrence import RECURRING_TYPES, RECURRING_NONE, due_occurrences, next_occurrence
from app.domain.transaction import TRANSACTION_TYPE_EXPENSE
from app.infrastructure.db.models import ScheduledPaymentModel, WalletModel, CategoryModel
from app.utils.dates import today_local

logger = logging.getLogger(__name__)


class ScheduledPaymentValidationError(DomainError):
    pass


def _validate_refs(db: Session, user_id: int, wallet_id: int, category_id: int) -> None:
    get_owned(db, WalletModel, wallet_id, user_id, "Wallet")
    category = get_owned(db, CategoryModel, category_id, user_id, "Category")
    if not is_compatible(category.type, TRANSACTION_TYPE_EXPENSE):
        raise ScheduledPaymentValidationError(
            f"Category «{category.name}» is not an expense category"
        )


class CreateScheduledPaymentUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        title: str,
        amount: Decimal,
        due_date: date,
        wallet_id: int,
        category_id: int,
        recurring: str = RECURRING_NONE,
    ) -> int:
        title = title.strip()
        if not title:
            raise ScheduledPaymentValidationError("Title is required")
        if amount <= 0:
            raise ScheduledPaymentValidationError("Amount must be greater than zero")
        if recurring not in RECURRING_TYPES:
            raise ScheduledPaymentValidationError(
                f"Invalid recurring: {recurring}. Use one of: {', '.join(RECURRING_TYPES)}"
            )
        _validate_refs(self.db, user_id, wallet_id, category_id)

        payment = ScheduledPaymentModel(
            user_id=user_id,
            title=title,
            amount=amount,
            date=due_date,
            anchor_day=due_date.day,
            wallet_id=wallet_id,
            category_id=category_id,
            recurring=recurring,
            completed=False,
        )
        self.db.add(payment)
        self.db.flush()
        self.db.commit()
        return payment.id


class UpdateScheduledPaymentUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, user_id: int, **changes) -> None:
        payment = get_owned(self.db, ScheduledPaymentModel, payment_id, user_id, "Scheduled payment")

        if changes.get("title") is not None:
            title = changes["title"].strip()
            if not title:
                raise ScheduledPaymentValidationError("Title is required")
            payment.title = title
        if changes.get("amount") is not None:
            if changes["amount"] <= 0:
                raise ScheduledPaymentValidationError("Amount must be greater than zero")
            payment.amount = changes["amount"]
        if changes.get("due_date") is not None:
            payment.date = changes["due_date"]
            payment.anchor_day = changes["due_date"].day
        if changes.get("recurring") is not None:
            if changes["recurring"] not in RECURRING_TYPES:
                raise ScheduledPaymentValidationError(f"Invalid recurring: {changes['recurring']}")
            payment.recurring = changes["recurring"]
        if changes.get("completed") is not None:
            payment.completed = changes["completed"]

        wallet_id = changes.get("wallet_id") or payment.wallet_id
        category_id = changes.get("category_id") or payment.category_id
        try:
            _validate_refs(self.db, user_id, wallet_id, category_id)
        except DomainError:
            self.db.rollback()
            raise
        payment.wallet_id = wallet_id
        payment.category_id = category_id

        self.db.commit()


class DeleteScheduledPaymentUseCase:
    """Already booked transactions stay; only the plan is removed"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, user_id: int) -> None:
        payment = get_owned(self.db, ScheduledPaymentModel, payment_id, user_id, "Scheduled payment")
        self.db.delete(payment)
        self.db.commit()


class ToggleScheduledPaymentUseCase:
    """Flip completed by hand, without booking a transaction"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, user_id: int) -> bool:
        payment = get_owned(self.db, ScheduledPaymentModel, payment_id, user_id, "Scheduled payment")
        payment.completed = not payment.completed
        self.db.commit()
        return payment.completed


# ============================================================================
# Processing
# ============================================================================


@dataclass
class ProcessResult:
    processed_payments: int = 0
    created_transactions: list[int] = field(default_factory=list)
    failed_payment_ids: list[int] = field(default_factory=list)


def _book_occurrence(
    db: Session,
    payment: ScheduledPaymentModel,
    tx_date: date,
    today: date,
) -> int:
    return CreateTransactionUseCase(db).execute(
        user_id=payment.user_id,
        wallet_id=payment.wallet_id,
        category_id=payment.category_id,
        amount=Decimal(payment.amount),
        transaction_type=TRANSACTION_TYPE_EXPENSE,
        description=payment.title,
        tx_date=tx_date,
        scheduled_payment_id=payment.id,
        today=today,
        commit=False,
    )


def _move_forward(payment: ScheduledPaymentModel, last_booked: date) -> None:
    nxt = next_occurrence(payment.recurring, last_booked, payment.anchor_day)
    if nxt is None:
        payment.completed = True
    else:
        payment.date = nxt
    payment.last_processed_at = datetime.now(timezone.utc)


def lock_payment_for_booking(
    db: Session,
    payment_id: int,
    user_id: int,
    due_by: date | None = None,
) -> ScheduledPaymentModel | None:
    """
    Re-read a scheduled payment under a row lock before booking it.

    Every booking path goes through here, so a payment picked up by the
    scheduler and by a request at the same time is booked once: the second
    caller waits for the lock and then sees the committed state.
    Returns None if the payment is completed, or not due by due_by.
    """
    payment = (
        db.query(ScheduledPaymentModel)
        .filter(
            ScheduledPaymentModel.id == payment_id,
            ScheduledPaymentModel.user_id == user_id,
        )
        .with_for_update()
        .populate_existing()
        .first()
    )
    if payment is None or payment.completed:
        return None
    if due_by is not None and payment.date > due_by:
        return None
    return payment


class ProcessDueScheduledPaymentsUseCase:
    """
    Use case: book every due occurrence of a user's scheduled payments

    Missed occurrences are caught up one transaction each, at most
    SCHEDULED_PAYMENTS_MAX_CATCHUP per payment per run.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, today: date | None = None) -> ProcessResult:
        today = today or today_local()
        limit = get_settings().SCHEDULED_PAYMENTS_MAX_CATCHUP
        result = ProcessResult()

        due_ids = [
            row.id for row in
            self.db.query(ScheduledPaymentModel.id).filter(
                ScheduledPaymentModel.user_id == user_id,
                ScheduledPaymentModel.completed == False,
                ScheduledPaymentModel.date <= today,
            ).order_by(ScheduledPaymentModel.date.asc(), ScheduledPaymentModel.id.asc()).all()
        ]

        for payment_id in due_ids:
            try:
                payment = lock_payment_for_booking(self.db, payment_id, user_id, due_by=today)
                if payment is None:
                    # booked elsewhere since due_ids was read
                    self.db.rollback()
                    continue
                occurrences = due_occurrences(
                    payment.recurring, payment.date, today, payment.anchor_day, limit=limit
                )
                booked = [_book_occurrence(self.db, payment, d, today) for d in occurrences]
                _move_forward(payment, occurrences[-1])
                self.db.commit()
            except Exception:
                self.db.rollback()
                logger.exception("Scheduled payment %s failed to process", payment_id)
                result.failed_payment_ids.append(payment_id)
                continue

            result.processed_payments += 1
            result.created_transactions.extend(booked)

        if due_ids:
            logger.info(
                "User %s: processed %d scheduled payments, %d transactions, %d failed",
                user_id, result.processed_payments,
                len(result.created_transactions), len(result.failed_payment_ids),
            )
        return result


class PayScheduledPaymentNowUseCase:
    """
    Use case: book the next occurrence right now, whatever its date

    The transaction is dated today; the series continues from its due date.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, payment_id: int, user_id: int, today: date | None = None) -> int:
        today = today or today_local()
        get_owned(self.db, ScheduledPaymentModel, payment_id, user_id, "Scheduled payment")
        payment = lock_payment_for_booking(self.db, payment_id, user_id)
        if payment is None:
            self.db.rollback()
            raise ScheduledPaymentValidationError("This scheduled payment is already completed")

        try:
            tx_id = _book_occurrence(self.db, payment, today, today)
            _move_forward(payment, payment.date)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return tx_id


def process_all_due(db: Session, today: date | None = None) -> ProcessResult:
    """Run the processing loop for every user that has something due (scheduler job)."""
    today = today or today_local()
    user_ids = [
        row.user_id for row in
        db.query(ScheduledPaymentModel.user_id).filter(
            ScheduledPaymentModel.completed == False,
            ScheduledPaymentModel.date <= today,
        ).distinct().all()
    ]

    total = ProcessResult()
    for user_id in user_ids:
        r = ProcessDueScheduledPaymentsUseCase(db).execute(user_id, today)
        total.processed_payments += r.processed_payments
        total.created_transactions.extend(r.created_transactions)
        total.failed_payment_ids.extend(r.failed_payment_ids)
    return total


def list_scheduled_payments(
    db: Session,
    user_id: int,
    include_completed: bool = True,
) -> list[ScheduledPaymentModel]:
    query = db.query(ScheduledPaymentModel).filter(ScheduledPaymentModel.user_id == user_id)
    if not include_completed:
        query = query.filter(ScheduledPaymentModel.completed == False)
    return query.order_by(ScheduledPaymentModel.date.asc(), ScheduledPaymentModel.id.asc()).all()
