"""
Category domain: types and the default set every new user starts with
"""

CATEGORY_TYPE_INCOME = "income"
CATEGORY_TYPE_EXPENSE = "expense"
CATEGORY_TYPE_BOTH = "both"

CATEGORY_TYPES = (CATEGORY_TYPE_INCOME, CATEGORY_TYPE_EXPENSE, CATEGORY_TYPE_BOTH)

# (name, type, icon); names double as i18n keys on the client
DEFAULT_CATEGORIES = [
    ("salary", CATEGORY_TYPE_INCOME, "Briefcase"),
    ("freelance", CATEGORY_TYPE_INCOME, "Laptop"),
    ("gifts", CATEGORY_TYPE_INCOME, "Gift"),
    ("food", CATEGORY_TYPE_EXPENSE, "Utensils"),
    ("transport", CATEGORY_TYPE_EXPENSE, "Car"),
    ("housing", CATEGORY_TYPE_EXPENSE, "Home"),
    ("utilities", CATEGORY_TYPE_EXPENSE, "Zap"),
    ("healthcare", CATEGORY_TYPE_EXPENSE, "HeartPulse"),
    ("personal", CATEGORY_TYPE_EXPENSE, "User"),
    ("entertainment", CATEGORY_TYPE_EXPENSE, "Film"),
    ("education", CATEGORY_TYPE_EXPENSE, "GraduationCap"),
    ("debt", CATEGORY_TYPE_EXPENSE, "CreditCard"),
    ("gam3eya", CATEGORY_TYPE_BOTH, "Users"),
    ("other", CATEGORY_TYPE_BOTH, "CircleDot"),
]


def is_compatible(category_type: str, transaction_type: str) -> bool:
    """A "both" category accepts income and expense transactions."""
    return category_type == CATEGORY_TYPE_BOTH or category_type == transaction_type
