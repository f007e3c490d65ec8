"""
Gam3eya domain: cycle arithmetic of a rotating savings group.

Every cycle (one month) each member contributes contribution_amount and one
member takes the pooled total_amount. The user settles a cycle by paying the
contribution and, in the cycle that is their turn, by receiving the payout.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.domain.recurrence import add_months

PAYMENT_TYPE_PAYMENT = "payment"
PAYMENT_TYPE_PAYOUT = "payout"

PAYMENT_TYPES = (PAYMENT_TYPE_PAYMENT, PAYMENT_TYPE_PAYOUT)

MIN_MEMBERS = 2


@dataclass(frozen=True)
class Gam3eyaPlan:
    """Derived schedule of a group"""
    total_cycles: int
    total_amount: Decimal
    end_date: date
    next_payment_date: date


def build_plan(
    members: int,
    contribution_amount: Decimal,
    start_date: date,
    total_cycles: int | None = None,
    total_amount: Decimal | None = None,
    end_date: date | None = None,
) -> Gam3eyaPlan:
    """
    Fill in the values the user did not give explicitly.

    One cycle per member, the pot is contribution * members and the last
    cycle starts (total_cycles - 1) months after start_date.
    """
    cycles = total_cycles if total_cycles is not None else members
    amount = total_amount if total_amount is not None else contribution_amount * members
    end = end_date if end_date is not None else add_months(start_date, cycles - 1)
    return Gam3eyaPlan(
        total_cycles=cycles,
        total_amount=amount,
        end_date=end,
        next_payment_date=start_date,
    )


def cycle_payment_date(start_date: date, cycle: int) -> date:
    """Due date of a cycle (1-based)"""
    return add_months(start_date, cycle - 1, anchor_day=start_date.day)


def is_my_turn_to_receive(my_turn: int | None, current_cycle: int, received_payout: bool) -> bool:
    return my_turn is not None and my_turn == current_cycle and not received_payout


def is_cycle_settled(
    current_cycle: int,
    paid_cycles: set[int],
    my_turn: int | None,
    received_payout: bool,
) -> bool:
    """The contribution is paid and, in the user's own cycle, the payout is taken."""
    if current_cycle not in paid_cycles:
        return False
    if my_turn == current_cycle and not received_payout:
        return False
    return True


def is_payment_due(next_payment_date: date, current_cycle: int, paid_cycles: set[int], today: date) -> bool:
    return next_payment_date <= today and current_cycle not in paid_cycles
