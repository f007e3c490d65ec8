"""
Transaction domain: how a transaction moves a wallet balance
"""
from decimal import Decimal

TRANSACTION_TYPE_INCOME = "income"
TRANSACTION_TYPE_EXPENSE = "expense"

TRANSACTION_TYPES = (TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE)


def balance_delta(transaction_type: str, amount: Decimal) -> Decimal:
    """
    Signed change a transaction applies to its wallet

    income  -> +amount
    expense -> -amount
    """
    if transaction_type == TRANSACTION_TYPE_INCOME:
        return amount
    if transaction_type == TRANSACTION_TYPE_EXPENSE:
        return -amount
    raise ValueError(f"invalid transaction type: {transaction_type}")
