"""
SQLAlchemy ORM models

Plain CRUD tables: every row belongs to a user (user_id).
"""
from decimal import Decimal
from datetime import date as date_type
from sqlalchemy import (
    String, DateTime, Integer, Text, TIMESTAMP, Date, func, Boolean, Numeric,
    ForeignKey, Index,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # UI language of the SPA: "en" / "ar"
    preferred_language: Mapped[str] = mapped_column(String(2), nullable=False, default="en", server_default="en")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EGP", server_default="EGP")

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )


class WalletModel(Base):
    __tablename__ = "wallets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2),
        nullable=False,
        default=Decimal("0"),
        server_default="0"
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False, default="cash", server_default="cash")  # cash, bank, savings, gam3eya, custom
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EGP", server_default="EGP")
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )


class CategoryModel(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # income, expense, both
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # Seeded defaults are not custom and stay read-only
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")


class TransactionModel(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_id: Mapped[int] = mapped_column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)  # income, expense
    description: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    receipt_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Set when the transaction was generated by the scheduled payments loop
    scheduled_payment_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_transactions_user_date", "user_id", "date"),
    )


class BudgetModel(Base):
    __tablename__ = "budgets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    spent: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=2), nullable=False, default=Decimal("0"), server_default="0"
    )
    period: Mapped[str] = mapped_column(String(16), nullable=False, default="monthly", server_default="monthly")  # monthly, weekly, yearly, custom
    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    # First day of the window spent was last computed for
    spent_window_start: Mapped[date_type | None] = mapped_column(Date, nullable=True)


class Gam3eyaModel(Base):
    """Rotating savings group the user takes part in"""
    __tablename__ = "gam3eyas"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    contribution_amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    members: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    current_cycle: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    total_cycles: Mapped[int] = mapped_column(Integer, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    next_payment_date: Mapped[date_type] = mapped_column(Date, nullable=False)

    # Cycle in which the user receives the pooled payout (1..total_cycles)
    my_turn: Mapped[int | None] = mapped_column(Integer, nullable=True)
    received_payout: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class Gam3eyaPaymentModel(Base):
    __tablename__ = "gam3eya_payments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    gam3eya_id: Mapped[int] = mapped_column(Integer, ForeignKey("gam3eyas.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_id: Mapped[int] = mapped_column(Integer, ForeignKey("wallets.id"), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    cycle: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)  # payment, payout

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_gam3eya_payments_cycle", "gam3eya_id", "cycle", "type"),
    )


class ReminderModel(Base):
    __tablename__ = "reminders"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class ScheduledPaymentModel(Base):
    """Planned expense that becomes a transaction on its due date"""
    __tablename__ = "scheduled_payments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    wallet_id: Mapped[int] = mapped_column(Integer, ForeignKey("wallets.id"), nullable=False)
    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=2), nullable=False)
    # Next due date; moved forward after every processed occurrence
    date: Mapped[date_type] = mapped_column(Date, nullable=False, index=True)
    # Day of month the series was created on; keeps the 31st after a short month
    anchor_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    recurring: Mapped[str] = mapped_column(String(16), nullable=False, default="none", server_default="none")  # none, daily, weekly, monthly, yearly
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
    last_processed_at: Mapped[DateTime | None] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
