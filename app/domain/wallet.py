"""
Wallet domain constants
"""

WALLET_TYPE_CASH = "cash"
WALLET_TYPE_BANK = "bank"
WALLET_TYPE_SAVINGS = "savings"
WALLET_TYPE_GAM3EYA = "gam3eya"  # money set aside for a savings group
WALLET_TYPE_CUSTOM = "custom"

WALLET_TYPES = (
    WALLET_TYPE_CASH,
    WALLET_TYPE_BANK,
    WALLET_TYPE_SAVINGS,
    WALLET_TYPE_GAM3EYA,
    WALLET_TYPE_CUSTOM,
)
