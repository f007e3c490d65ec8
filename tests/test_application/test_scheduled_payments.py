"""
Tests for scheduled payments and the processing loop
"""
from datetime import date
from decimal import Decimal

import pytest

from app.application.categories import CreateCategoryUseCase
from app.application.wallets import CreateWalletUseCase
from app.application.scheduled_payments import (
    CreateScheduledPaymentUseCase, UpdateScheduledPaymentUseCase, DeleteScheduledPaymentUseCase,
    ToggleScheduledPaymentUseCase, ProcessDueScheduledPaymentsUseCase, PayScheduledPaymentNowUseCase,
    ScheduledPaymentValidationError, process_all_due, list_scheduled_payments, lock_payment_for_booking,
)
from app.infrastructure.db.models import (
    ScheduledPaymentModel, TransactionModel, WalletModel, CategoryModel,
)


def _create(db, user_id, wallet_id, category_id, due_date, recurring="none", amount="100", title="Rent"):
    return CreateScheduledPaymentUseCase(db).execute(
        user_id=user_id,
        title=title,
        amount=Decimal(amount),
        due_date=due_date,
        wallet_id=wallet_id,
        category_id=category_id,
        recurring=recurring,
    )


def _payment(db, payment_id) -> ScheduledPaymentModel:
    db.expire_all()
    return db.get(ScheduledPaymentModel, payment_id)


def test_create_requires_expense_category(db_session, sample_user_id, wallet_id, salary_id):
    with pytest.raises(ScheduledPaymentValidationError):
        _create(db_session, sample_user_id, wallet_id, salary_id, date(2026, 3, 1))


def test_create_rejects_unknown_frequency(db_session, sample_user_id, wallet_id, food_id):
    with pytest.raises(ScheduledPaymentValidationError):
        _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 1), recurring="hourly")


def test_one_off_payment_is_booked_and_completed(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 10))

    result = ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)

    assert result.processed_payments == 1
    assert len(result.created_transactions) == 1
    tx = db_session.get(TransactionModel, result.created_transactions[0])
    assert tx.type == "expense"
    assert tx.date == date(2026, 3, 10)
    assert tx.description == "Rent"
    assert tx.scheduled_payment_id == payment_id

    payment = _payment(db_session, payment_id)
    assert payment.completed
    assert payment.last_processed_at is not None
    assert db_session.get(WalletModel, wallet_id).balance == Decimal("900")


def test_future_payment_is_left_alone(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 16))
    result = ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)
    assert result.processed_payments == 0
    assert not _payment(db_session, payment_id).completed


def test_monthly_catch_up_keeps_the_31st(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 1, 31), recurring="monthly")

    result = ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)

    dates = sorted(db_session.get(TransactionModel, tx_id).date for tx_id in result.created_transactions)
    assert dates == [date(2026, 1, 31), date(2026, 2, 28)]
    payment = _payment(db_session, payment_id)
    assert payment.date == date(2026, 3, 31)
    assert not payment.completed
    assert db_session.get(WalletModel, wallet_id).balance == Decimal("800")


def test_second_run_books_nothing(db_session, sample_user_id, wallet_id, food_id, today):
    _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 1), recurring="weekly")
    uc = ProcessDueScheduledPaymentsUseCase(db_session)
    first = uc.execute(sample_user_id, today)
    second = uc.execute(sample_user_id, today)

    # 1, 8 and 15 March
    assert len(first.created_transactions) == 3
    assert second.created_transactions == []


def test_failure_of_one_payment_does_not_stop_others(db_session, sample_user_id, wallet_id, food_id, today):
    broken_category = CreateCategoryUseCase(db_session).execute(sample_user_id, "Soon income", "expense")
    broken = _create(db_session, sample_user_id, wallet_id, broken_category, date(2026, 3, 1), title="Broken")
    ok = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 2), title="Ok")

    # category flipped to income after the plan was made
    db_session.get(CategoryModel, broken_category).type = "income"
    db_session.commit()

    result = ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)

    assert result.failed_payment_ids == [broken]
    assert result.processed_payments == 1
    assert _payment(db_session, ok).completed
    assert not _payment(db_session, broken).completed
    assert db_session.query(TransactionModel).count() == 1
    assert db_session.get(WalletModel, wallet_id).balance == Decimal("900")


def test_pay_now_books_today_and_advances(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 4, 5), recurring="monthly")

    tx_id = PayScheduledPaymentNowUseCase(db_session).execute(payment_id, sample_user_id, today)

    assert db_session.get(TransactionModel, tx_id).date == today
    assert _payment(db_session, payment_id).date == date(2026, 5, 5)


def test_pay_now_on_completed_payment_is_refused(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 4, 5))
    assert ToggleScheduledPaymentUseCase(db_session).execute(payment_id, sample_user_id) is True
    with pytest.raises(ScheduledPaymentValidationError):
        PayScheduledPaymentNowUseCase(db_session).execute(payment_id, sample_user_id, today)


def test_process_all_due_covers_every_user(db_session, sample_user_id, wallet_id, food_id, today):
    other_user = sample_user_id + 1
    other_wallet = CreateWalletUseCase(db_session).execute(user_id=other_user, name="Other")
    other_category = CreateCategoryUseCase(db_session).execute(other_user, "Bills", "expense")
    _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 1))
    _create(db_session, other_user, other_wallet, other_category, date(2026, 3, 2))

    result = process_all_due(db_session, today)

    assert result.processed_payments == 2
    assert db_session.get(WalletModel, other_wallet).balance == Decimal("-100")


def test_update_moves_anchor_day(db_session, sample_user_id, wallet_id, food_id):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 1, 15), recurring="monthly")
    UpdateScheduledPaymentUseCase(db_session).execute(
        payment_id, sample_user_id, due_date=date(2026, 2, 28), amount=Decimal("55"),
    )
    payment = _payment(db_session, payment_id)
    assert payment.anchor_day == 28
    assert payment.amount == Decimal("55")


def test_list_and_delete(db_session, sample_user_id, wallet_id, food_id, today):
    done = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 1))
    pending = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 4, 1))
    ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)

    assert [p.id for p in list_scheduled_payments(db_session, sample_user_id)] == [done, pending]
    assert [p.id for p in list_scheduled_payments(db_session, sample_user_id, include_completed=False)] == [pending]

    DeleteScheduledPaymentUseCase(db_session).execute(done, sample_user_id)
    assert _payment(db_session, done) is None
    # booked transaction survives the plan
    assert db_session.query(TransactionModel).count() == 1


def test_stale_processor_books_nothing(db_engine, db_session, sample_user_id, wallet_id, food_id, today):
    from sqlalchemy.orm import sessionmaker

    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 10))
    other = sessionmaker(bind=db_engine)()
    try:
        # the other worker read the payment while it was still due
        stale = other.get(ScheduledPaymentModel, payment_id)
        assert not stale.completed

        ProcessDueScheduledPaymentsUseCase(db_session).execute(sample_user_id, today)

        assert lock_payment_for_booking(other, payment_id, sample_user_id, due_by=today) is None
        with pytest.raises(ScheduledPaymentValidationError):
            PayScheduledPaymentNowUseCase(other).execute(payment_id, sample_user_id, today)
    finally:
        other.close()

    db_session.expire_all()
    booked = db_session.query(TransactionModel).filter(
        TransactionModel.scheduled_payment_id == payment_id
    ).count()
    assert booked == 1
    assert db_session.get(WalletModel, wallet_id).balance == Decimal("900")


def test_lock_skips_payment_moved_past_today(db_session, sample_user_id, wallet_id, food_id, today):
    payment_id = _create(db_session, sample_user_id, wallet_id, food_id, date(2026, 3, 10), recurring="monthly")
    PayScheduledPaymentNowUseCase(db_session).execute(payment_id, sample_user_id, today)

    # now due 2026-04-10, so a run for today has nothing left to book
    assert lock_payment_for_booking(db_session, payment_id, sample_user_id, due_by=today) is None
    assert lock_payment_for_booking(db_session, payment_id, sample_user_id).date == date(2026, 4, 10)
