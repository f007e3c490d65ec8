"""
Gam3eya use cases: group CRUD, contributions, payouts and cycle advance.

Contributions and payouts move wallet balances directly and are recorded in
gam3eya_payments, which is the group's own ledger (no transactions rows).
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session

from app.application.common import DomainError, get_owned
from app.domain.gam3eya import (
    MIN_MEMBERS, PAYMENT_TYPE_PAYMENT, PAYMENT_TYPE_PAYOUT,
    build_plan, cycle_payment_date, is_cycle_settled, is_my_turn_to_receive, is_payment_due,
)
from app.infrastructure.db.models import Gam3eyaModel, Gam3eyaPaymentModel, WalletModel
from app.utils.dates import today_local

logger = logging.getLogger(__name__)


class Gam3eyaValidationError(DomainError):
    pass


def _validate_turn(my_turn: int | None, total_cycles: int) -> None:
    if my_turn is not None and not (1 <= my_turn <= total_cycles):
        raise Gam3eyaValidationError(f"my_turn must be between 1 and {total_cycles}")


def paid_cycles(db: Session, gam3eya_id: int) -> set[int]:
    return {
        row.cycle for row in
        db.query(Gam3eyaPaymentModel.cycle).filter(
            Gam3eyaPaymentModel.gam3eya_id == gam3eya_id,
            Gam3eyaPaymentModel.type == PAYMENT_TYPE_PAYMENT,
        ).all()
    }


def advance_if_settled(db: Session, g: Gam3eyaModel) -> None:
    """
    Move past every settled cycle starting at the current one.
    Settling the last cycle completes the group.
    """
    paid = paid_cycles(db, g.id)
    while is_cycle_settled(g.current_cycle, paid, g.my_turn, g.received_payout):
        if g.current_cycle >= g.total_cycles:
            g.is_completed = True
            logger.info("Gam3eya %s completed", g.id)
            return
        g.current_cycle += 1
        g.next_payment_date = cycle_payment_date(g.start_date, g.current_cycle)


class CreateGam3eyaUseCase:
    """
    Use case: join/create a savings group

    Missing totals are derived: one cycle per member, pot = contribution * members.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        contribution_amount: Decimal,
        members: int,
        start_date: date,
        total_amount: Decimal | None = None,
        total_cycles: int | None = None,
        end_date: date | None = None,
        my_turn: int | None = None,
        is_admin: bool = False,
    ) -> int:
        name = name.strip()
        if not name:
            raise Gam3eyaValidationError("Gam3eya name is required")
        if members < MIN_MEMBERS:
            raise Gam3eyaValidationError(f"A gam3eya needs at least {MIN_MEMBERS} members")
        if contribution_amount <= 0:
            raise Gam3eyaValidationError("Contribution amount must be greater than zero")
        if total_amount is not None and total_amount <= 0:
            raise Gam3eyaValidationError("Total amount must be greater than zero")
        if total_cycles is not None and total_cycles < 1:
            raise Gam3eyaValidationError("total_cycles must be at least 1")
        if end_date is not None and end_date < start_date:
            raise Gam3eyaValidationError("end_date must be on or after start_date")

        plan = build_plan(
            members=members,
            contribution_amount=contribution_amount,
            start_date=start_date,
            total_cycles=total_cycles,
            total_amount=total_amount,
            end_date=end_date,
        )
        _validate_turn(my_turn, plan.total_cycles)

        g = Gam3eyaModel(
            user_id=user_id,
            name=name,
            total_amount=plan.total_amount,
            contribution_amount=contribution_amount,
            members=members,
            start_date=start_date,
            end_date=plan.end_date,
            current_cycle=1,
            total_cycles=plan.total_cycles,
            is_admin=is_admin,
            next_payment_date=plan.next_payment_date,
            my_turn=my_turn,
            received_payout=False,
            is_completed=False,
        )
        self.db.add(g)
        self.db.flush()
        self.db.commit()
        return g.id


class UpdateGam3eyaUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, gam3eya_id: int, user_id: int, **changes) -> None:
        g = get_owned(self.db, Gam3eyaModel, gam3eya_id, user_id, "Gam3eya")

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise Gam3eyaValidationError("Gam3eya name is required")
            g.name = name
        if changes.get("members") is not None:
            if changes["members"] < MIN_MEMBERS:
                raise Gam3eyaValidationError(f"A gam3eya needs at least {MIN_MEMBERS} members")
            g.members = changes["members"]
        for field in ("contribution_amount", "total_amount"):
            if changes.get(field) is not None:
                if changes[field] <= 0:
                    raise Gam3eyaValidationError(f"{field} must be greater than zero")
                setattr(g, field, changes[field])
        if changes.get("total_cycles") is not None:
            if changes["total_cycles"] < 1:
                raise Gam3eyaValidationError("total_cycles must be at least 1")
            g.total_cycles = changes["total_cycles"]
        for field in ("start_date", "end_date", "next_payment_date"):
            if changes.get(field) is not None:
                setattr(g, field, changes[field])
        if changes.get("is_admin") is not None:
            g.is_admin = changes["is_admin"]
        if changes.get("received_payout") is not None:
            g.received_payout = changes["received_payout"]
        if "my_turn" in changes:
            g.my_turn = changes["my_turn"]
        if changes.get("current_cycle") is not None:
            g.current_cycle = changes["current_cycle"]

        try:
            if g.end_date < g.start_date:
                raise Gam3eyaValidationError("end_date must be on or after start_date")
            if not (1 <= g.current_cycle <= g.total_cycles):
                raise Gam3eyaValidationError(f"current_cycle must be between 1 and {g.total_cycles}")
            _validate_turn(g.my_turn, g.total_cycles)
        except Gam3eyaValidationError:
            self.db.rollback()
            raise

        if changes.get("current_cycle") is not None:
            if changes.get("next_payment_date") is None:
                g.next_payment_date = cycle_payment_date(g.start_date, g.current_cycle)
            g.is_completed = False
            advance_if_settled(self.db, g)

        self.db.commit()


class DeleteGam3eyaUseCase:
    """Deletes the group and its ledger; wallet balances stay as they are"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, gam3eya_id: int, user_id: int) -> None:
        g = get_owned(self.db, Gam3eyaModel, gam3eya_id, user_id, "Gam3eya")
        self.db.query(Gam3eyaPaymentModel).filter(
            Gam3eyaPaymentModel.gam3eya_id == g.id
        ).delete(synchronize_session=False)
        self.db.delete(g)
        self.db.commit()


class _Gam3eyaMoneyUseCase:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, gam3eya_id: int, user_id: int, wallet_id: int) -> tuple[Gam3eyaModel, WalletModel]:
        g = get_owned(self.db, Gam3eyaModel, gam3eya_id, user_id, "Gam3eya")
        wallet = get_owned(self.db, WalletModel, wallet_id, user_id, "Wallet")
        if g.is_completed:
            raise Gam3eyaValidationError("This gam3eya is already completed")
        return g, wallet


class MakeGam3eyaPaymentUseCase(_Gam3eyaMoneyUseCase):
    """
    Use case: pay the contribution of the current cycle from a wallet

    Rules:
    - amount is always contribution_amount
    - the wallet must hold at least that much
    - a cycle is paid once
    """

    def execute(self, gam3eya_id: int, user_id: int, wallet_id: int, payment_date: date | None = None) -> int:
        g, wallet = self._load(gam3eya_id, user_id, wallet_id)
        amount = Decimal(g.contribution_amount)

        if g.current_cycle in paid_cycles(self.db, g.id):
            raise Gam3eyaValidationError(f"Cycle {g.current_cycle} is already paid")
        if Decimal(wallet.balance) < amount:
            raise Gam3eyaValidationError("Insufficient wallet balance for this contribution")

        payment = Gam3eyaPaymentModel(
            user_id=user_id,
            gam3eya_id=g.id,
            wallet_id=wallet.id,
            amount=amount,
            date=payment_date or today_local(),
            cycle=g.current_cycle,
            type=PAYMENT_TYPE_PAYMENT,
        )
        try:
            self.db.add(payment)
            wallet.balance = Decimal(wallet.balance) - amount
            self.db.flush()
            advance_if_settled(self.db, g)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return payment.id


class ReceiveGam3eyaPayoutUseCase(_Gam3eyaMoneyUseCase):
    """
    Use case: take the pooled payout into a wallet

    Only in the user's own cycle, only once.
    """

    def execute(self, gam3eya_id: int, user_id: int, wallet_id: int, payout_date: date | None = None) -> int:
        g, wallet = self._load(gam3eya_id, user_id, wallet_id)

        if g.my_turn is None:
            raise Gam3eyaValidationError("Set your turn before receiving a payout")
        if g.received_payout:
            raise Gam3eyaValidationError("Payout has already been received")
        if g.my_turn != g.current_cycle:
            raise Gam3eyaValidationError(
                f"Your payout is due in cycle {g.my_turn}, current cycle is {g.current_cycle}"
            )

        amount = Decimal(g.total_amount)
        payout = Gam3eyaPaymentModel(
            user_id=user_id,
            gam3eya_id=g.id,
            wallet_id=wallet.id,
            amount=amount,
            date=payout_date or today_local(),
            cycle=g.current_cycle,
            type=PAYMENT_TYPE_PAYOUT,
        )
        try:
            self.db.add(payout)
            wallet.balance = Decimal(wallet.balance) + amount
            g.received_payout = True
            self.db.flush()
            advance_if_settled(self.db, g)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return payout.id


# ============================================================================
# Read side
# ============================================================================


@dataclass
class Gam3eyaView:
    gam3eya: Gam3eyaModel
    paid_cycles: list[int]
    is_payment_due: bool
    is_my_turn_to_receive: bool
    progress_percent: int


def build_gam3eya_view(db: Session, g: Gam3eyaModel, today: date) -> Gam3eyaView:
    paid = paid_cycles(db, g.id)
    settled = len(paid) if g.is_completed else max(g.current_cycle - 1, 0)
    return Gam3eyaView(
        gam3eya=g,
        paid_cycles=sorted(paid),
        is_payment_due=(not g.is_completed) and is_payment_due(g.next_payment_date, g.current_cycle, paid, today),
        is_my_turn_to_receive=(not g.is_completed) and is_my_turn_to_receive(g.my_turn, g.current_cycle, g.received_payout),
        progress_percent=100 if g.is_completed else int(settled * 100 / g.total_cycles),
    )


def list_gam3eyas(db: Session, user_id: int, today: date | None = None) -> list[Gam3eyaView]:
    today = today or today_local()
    groups = db.query(Gam3eyaModel).filter(
        Gam3eyaModel.user_id == user_id
    ).order_by(Gam3eyaModel.is_completed.asc(), Gam3eyaModel.next_payment_date.asc()).all()
    return [build_gam3eya_view(db, g, today) for g in groups]


def list_gam3eya_payments(db: Session, gam3eya_id: int, user_id: int) -> list[Gam3eyaPaymentModel]:
    get_owned(db, Gam3eyaModel, gam3eya_id, user_id, "Gam3eya")
    return db.query(Gam3eyaPaymentModel).filter(
        Gam3eyaPaymentModel.gam3eya_id == gam3eya_id,
        Gam3eyaPaymentModel.user_id == user_id,
    ).order_by(Gam3eyaPaymentModel.date.desc(), Gam3eyaPaymentModel.id.desc()).all()
