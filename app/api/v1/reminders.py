"""
Reminder API endpoints
"""
from datetime import date as date_type
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user
from app.application.common import get_owned
from app.application.reminders import (
    CreateReminderUseCase, UpdateReminderUseCase, ToggleReminderUseCase, DeleteReminderUseCase,
    list_reminders,
)
from app.infrastructure.db.models import User, ReminderModel


router = APIRouter(prefix="/api/v1/reminders", tags=["reminders"])


class CreateReminderRequest(BaseModel):
    title: str
    date: date_type
    notes: str | None = None


class UpdateReminderRequest(BaseModel):
    title: str | None = None
    date: date_type | None = None
    notes: str | None = None
    completed: bool | None = None


class ReminderResponse(BaseModel):
    id: int
    title: str
    date: date_type
    notes: str | None
    completed: bool


def _to_response(r: ReminderModel) -> ReminderResponse:
    return ReminderResponse(id=r.id, title=r.title, date=r.date, notes=r.notes, completed=r.completed)


@router.get("/", response_model=list[ReminderResponse])
def get_reminders(
    status: str = "all",  # all, pending, completed, overdue
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [_to_response(r) for r in list_reminders(db, user.id, status)]


@router.post("/", response_model=ReminderResponse, status_code=201)
def create_reminder(
    req: CreateReminderRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reminder_id = CreateReminderUseCase(db).execute(user.id, req.title, req.date, req.notes)
    return _to_response(get_owned(db, ReminderModel, reminder_id, user.id, "Reminder"))


@router.put("/{reminder_id}", response_model=ReminderResponse)
def update_reminder(
    reminder_id: int,
    req: UpdateReminderRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    changes = req.model_dump(exclude_unset=True)
    if "date" in changes:
        changes["reminder_date"] = changes.pop("date")
    UpdateReminderUseCase(db).execute(reminder_id, user.id, **changes)
    return _to_response(get_owned(db, ReminderModel, reminder_id, user.id, "Reminder"))


@router.post("/{reminder_id}/toggle", response_model=ReminderResponse)
def toggle_reminder(reminder_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    ToggleReminderUseCase(db).execute(reminder_id, user.id)
    return _to_response(get_owned(db, ReminderModel, reminder_id, user.id, "Reminder"))


@router.delete("/{reminder_id}")
def delete_reminder(reminder_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteReminderUseCase(db).execute(reminder_id, user.id)
    return {"status": "deleted"}
