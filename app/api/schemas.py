"""
Shared pydantic field types for request models
"""
from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator

from app.utils.validation import validate_and_normalize_amount, validate_positive_amount

# "100,50" / 100.5 / "100.50" -> Decimal("100.50"); at most 2 decimal places
Money = Annotated[Decimal, BeforeValidator(validate_and_normalize_amount)]

# Same, but strictly greater than zero
PositiveMoney = Annotated[Decimal, BeforeValidator(validate_positive_amount)]
