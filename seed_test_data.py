"""
Seed demo data for demo@gam3eya.local
Run:  python seed_test_data.py
"""
from decimal import Decimal
from datetime import date

from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import CategoryModel, WalletModel
from app.auth import get_user_by_email

from app.application.users import RegisterUserUseCase
from app.application.wallets import CreateWalletUseCase
from app.application.transactions import CreateTransactionUseCase
from app.application.budgets import CreateBudgetUseCase
from app.application.gam3eya import CreateGam3eyaUseCase
from app.application.reminders import CreateReminderUseCase
from app.application.scheduled_payments import CreateScheduledPaymentUseCase
from app.utils.dates import today_local

EMAIL = "demo@gam3eya.local"
PASSWORD = "demo1234"

db = get_session_factory()()

user = get_user_by_email(db, EMAIL)
if user is None:
    user, _ = RegisterUserUseCase(db).execute("Demo", EMAIL, PASSWORD)
    print(f"Created user {EMAIL} (id={user.id})")

if db.query(WalletModel).filter_by(user_id=user.id).count() > 0:
    print("Wallets exist, nothing to seed.")
    db.close()
    raise SystemExit(0)

cats = {c.name: c.id for c in db.query(CategoryModel).filter_by(user_id=user.id).all()}
today = today_local()
month_start = date(today.year, today.month, 1)

# ── wallets ─────────────────────────────────────────────────────
wallet_uc = CreateWalletUseCase(db)
w_cash = wallet_uc.execute(user.id, "Cash", "cash", Decimal("3000"))
w_bank = wallet_uc.execute(user.id, "CIB account", "bank", Decimal("25000"))
w_savings = wallet_uc.execute(user.id, "Savings", "savings", Decimal("50000"))
print("  3 wallets created")

# ── transactions (this month) ───────────────────────────────────
tx_uc = CreateTransactionUseCase(db)
rows = [
    (w_bank, "salary", "18000", "income", "Monthly salary"),
    (w_bank, "housing", "6500", "expense", "Rent"),
    (w_cash, "food", "1200", "expense", "Groceries"),
    (w_cash, "transport", "350", "expense", "Metro + taxi"),
    (w_bank, "utilities", "900", "expense", "Electricity and internet"),
    (w_cash, "entertainment", "400", "expense", "Cinema"),
]
for wallet_id, category, amount, tx_type, description in rows:
    tx_uc.execute(user.id, wallet_id, cats[category], Decimal(amount), tx_type, description, tx_date=month_start)
print(f"  {len(rows)} transactions created")

# ── budgets ─────────────────────────────────────────────────────
budget_uc = CreateBudgetUseCase(db)
budget_uc.execute(user.id, cats["food"], Decimal("3000"))
budget_uc.execute(user.id, cats["entertainment"], Decimal("300"))
print("  2 budgets created")

# ── gam3eya ─────────────────────────────────────────────────────
CreateGam3eyaUseCase(db).execute(
    user_id=user.id,
    name="Family gam3eya",
    contribution_amount=Decimal("1000"),
    members=10,
    start_date=month_start,
    my_turn=4,
)
print("  1 gam3eya created")

# ── reminders / scheduled payments ──────────────────────────────
CreateReminderUseCase(db).execute(user.id, "Renew car license", today, "Traffic unit, bring ID")
CreateScheduledPaymentUseCase(db).execute(
    user_id=user.id,
    title="Internet bill",
    amount=Decimal("450"),
    due_date=today,
    wallet_id=w_bank,
    category_id=cats["utilities"],
    recurring="monthly",
)
print("  1 reminder, 1 scheduled payment created")

db.close()
print(f"\nDone! Login: {EMAIL} / {PASSWORD}")
