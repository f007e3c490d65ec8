"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation


def normalize_decimal_input(value: str) -> str:
    """
    Normalize an amount typed by a user: comma becomes a dot, spaces go away

    Example:
        >>> normalize_decimal_input("1 250,50")
        "1250.50"
    """
    return value.strip().replace(" ", "").replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Validate a money amount

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "At most 2 decimal places allowed")
    """
    normalized = normalize_decimal_input(value)

    try:
        decimal_value = Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Invalid amount"

    if not decimal_value.is_finite():
        return False, "Invalid amount"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"At most {max_decimal_places} decimal places allowed"

    return True, None


def validate_and_normalize_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Validate and convert an amount (str / int / float / Decimal) to Decimal

    Raises:
        ValueError: if validation fails
    """
    raw = format(value, "f") if isinstance(value, Decimal) else str(value)
    is_valid, error = validate_decimal_amount(raw, max_decimal_places)
    if not is_valid:
        raise ValueError(error)

    return Decimal(normalize_decimal_input(raw))


def validate_positive_amount(value, max_decimal_places: int = 2) -> Decimal:
    """Same as validate_and_normalize_amount, but the amount must be > 0"""
    amount = validate_and_normalize_amount(value, max_decimal_places)
    if amount <= 0:
        raise ValueError("Amount must be greater than zero")
    return amount
