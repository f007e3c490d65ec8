"""
Shared application errors and ownership lookups
"""
from typing import TypeVar

from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")


class DomainError(ValueError):
    """Base for every business rule violation (HTTP 400)"""
    pass


class NotFoundError(DomainError):
    """Row does not exist or belongs to another user (HTTP 404)"""
    pass


class AuthenticationError(DomainError):
    """Bad credentials (HTTP 401)"""
    pass


def get_owned(db: Session, model: type[ModelT], entity_id: int, user_id: int, label: str) -> ModelT:
    """
    Load a row by id, scoped to its owner.

    Someone else's row is reported exactly like a missing one.
    """
    entity = db.query(model).filter(
        model.id == entity_id,
        model.user_id == user_id,
    ).first()
    if entity is None:
        raise NotFoundError(f"{label} #{entity_id} not found")
    return entity
