"""
Tests for Reminder use cases
"""
from datetime import date

import pytest

from app.application.common import NotFoundError
from app.application.reminders import (
    CreateReminderUseCase, UpdateReminderUseCase, ToggleReminderUseCase, DeleteReminderUseCase,
    ReminderValidationError, list_reminders,
)
from app.infrastructure.db.models import ReminderModel


def test_create_and_toggle(db_session, sample_user_id):
    reminder_id = CreateReminderUseCase(db_session).execute(sample_user_id, "Pay club fee", date(2026, 3, 20), "  ")
    reminder = db_session.get(ReminderModel, reminder_id)
    assert reminder.notes is None
    assert not reminder.completed

    toggle = ToggleReminderUseCase(db_session)
    assert toggle.execute(reminder_id, sample_user_id) is True
    assert toggle.execute(reminder_id, sample_user_id) is False


def test_title_is_required(db_session, sample_user_id):
    with pytest.raises(ReminderValidationError):
        CreateReminderUseCase(db_session).execute(sample_user_id, " ", date(2026, 3, 20))


def test_status_filters(db_session, sample_user_id, today):
    uc = CreateReminderUseCase(db_session)
    overdue = uc.execute(sample_user_id, "Overdue", date(2026, 3, 1))
    upcoming = uc.execute(sample_user_id, "Upcoming", date(2026, 3, 30))
    done = uc.execute(sample_user_id, "Done", date(2026, 3, 2))
    ToggleReminderUseCase(db_session).execute(done, sample_user_id)

    def ids(status):
        return [r.id for r in list_reminders(db_session, sample_user_id, status, today)]

    assert ids("all") == [overdue, done, upcoming]
    assert ids("pending") == [overdue, upcoming]
    assert ids("completed") == [done]
    assert ids("overdue") == [overdue]

    with pytest.raises(ReminderValidationError):
        ids("someday")


def test_update_and_delete(db_session, sample_user_id):
    reminder_id = CreateReminderUseCase(db_session).execute(sample_user_id, "Call bank", date(2026, 3, 20))
    UpdateReminderUseCase(db_session).execute(
        reminder_id, sample_user_id, title="Call CIB", reminder_date=date(2026, 3, 21), notes="ask about fees",
    )
    reminder = db_session.get(ReminderModel, reminder_id)
    assert reminder.title == "Call CIB"
    assert reminder.date == date(2026, 3, 21)
    assert reminder.notes == "ask about fees"

    with pytest.raises(NotFoundError):
        DeleteReminderUseCase(db_session).execute(reminder_id, sample_user_id + 1)
    DeleteReminderUseCase(db_session).execute(reminder_id, sample_user_id)
    assert db_session.get(ReminderModel, reminder_id) is None
