"""
Reminder use cases
"""
from datetime import date
from sqlalchemy.orm import Session

from app.application.common import DomainError, get_owned
from app.infrastructure.db.models import ReminderModel
from app.utils.dates import today_local

REMINDER_STATUSES = ("all", "pending", "completed", "overdue")


class ReminderValidationError(DomainError):
    pass


class CreateReminderUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, title: str, reminder_date: date, notes: str | None = None) -> int:
        title = title.strip()
        if not title:
            raise ReminderValidationError("Title is required")

        reminder = ReminderModel(
            user_id=user_id,
            title=title,
            date=reminder_date,
            notes=(notes or "").strip() or None,
            completed=False,
        )
        self.db.add(reminder)
        self.db.flush()
        self.db.commit()
        return reminder.id


class UpdateReminderUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, reminder_id: int, user_id: int, **changes) -> None:
        reminder = get_owned(self.db, ReminderModel, reminder_id, user_id, "Reminder")

        if changes.get("title") is not None:
            title = changes["title"].strip()
            if not title:
                raise ReminderValidationError("Title is required")
            reminder.title = title
        if changes.get("reminder_date") is not None:
            reminder.date = changes["reminder_date"]
        if "notes" in changes:
            reminder.notes = (changes["notes"] or "").strip() or None
        if changes.get("completed") is not None:
            reminder.completed = changes["completed"]
        self.db.commit()


class ToggleReminderUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, reminder_id: int, user_id: int) -> bool:
        """Flip completed; returns the new value"""
        reminder = get_owned(self.db, ReminderModel, reminder_id, user_id, "Reminder")
        reminder.completed = not reminder.completed
        self.db.commit()
        return reminder.completed


class DeleteReminderUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, reminder_id: int, user_id: int) -> None:
        reminder = get_owned(self.db, ReminderModel, reminder_id, user_id, "Reminder")
        self.db.delete(reminder)
        self.db.commit()


def list_reminders(
    db: Session,
    user_id: int,
    status: str = "all",
    today: date | None = None,
) -> list[ReminderModel]:
    """
    status:
        all       - everything
        pending   - not completed
        completed - done
        overdue   - not completed and dated before today
    """
    if status not in REMINDER_STATUSES:
        raise ReminderValidationError(
            f"Invalid status: {status}. Use one of: {', '.join(REMINDER_STATUSES)}"
        )

    query = db.query(ReminderModel).filter(ReminderModel.user_id == user_id)
    if status == "pending":
        query = query.filter(ReminderModel.completed == False)
    elif status == "completed":
        query = query.filter(ReminderModel.completed == True)
    elif status == "overdue":
        query = query.filter(
            ReminderModel.completed == False,
            ReminderModel.date < (today or today_local()),
        )
    return query.order_by(ReminderModel.date.asc(), ReminderModel.id.asc()).all()
