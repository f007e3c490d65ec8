"""
User use cases: registration, login, profile and password changes
"""
import logging
import re

from sqlalchemy.orm import Session

from app.application.categories import EnsureDefaultCategoriesUseCase
from app.application.common import DomainError, AuthenticationError, NotFoundError
from app.auth import hash_password, verify_password, get_user_by_email, create_access_token
from app.config import get_settings
from app.infrastructure.db.models import User

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("en", "ar")
MIN_PASSWORD_LENGTH = 6
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserValidationError(DomainError):
    pass


def _validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise UserValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


class RegisterUserUseCase:
    """
    Use case: sign up

    Creates the user, seeds the default categories and issues a token.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        name: str,
        email: str,
        password: str,
        preferred_language: str = "en",
    ) -> tuple[User, str]:
        name = name.strip()
        email = email.strip().lower()
        if not name:
            raise UserValidationError("Name is required")
        if not _EMAIL_RE.match(email):
            raise UserValidationError("Invalid email address")
        if preferred_language not in SUPPORTED_LANGUAGES:
            raise UserValidationError(f"Unsupported language: {preferred_language}")
        _validate_password(password)

        if get_user_by_email(self.db, email):
            raise UserValidationError("A user with this email already exists")

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(password),
            preferred_language=preferred_language,
            currency=get_settings().DEFAULT_CURRENCY,
        )
        try:
            self.db.add(user)
            self.db.flush()
            EnsureDefaultCategoriesUseCase(self.db).execute(user.id, commit=False)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Registered user %s", user.id)
        return user, create_access_token(user.id)


class LoginUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, email: str, password: str) -> tuple[User, str]:
        user = get_user_by_email(self.db, email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        return user, create_access_token(user.id)


class UpdateProfileUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, **changes) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User #{user_id} not found")

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise UserValidationError("Name is required")
            user.name = name
        if changes.get("preferred_language") is not None:
            if changes["preferred_language"] not in SUPPORTED_LANGUAGES:
                raise UserValidationError(
                    f"Unsupported language: {changes['preferred_language']}"
                )
            user.preferred_language = changes["preferred_language"]
        if changes.get("currency") is not None:
            currency = changes["currency"].strip().upper()
            if not re.fullmatch(r"[A-Z]{3}", currency):
                raise UserValidationError(f"Invalid currency code: {changes['currency']}")
            user.currency = currency

        self.db.commit()
        return user


class ChangePasswordUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError(f"User #{user_id} not found")
        if not verify_password(current_password, user.password_hash):
            raise UserValidationError("Current password is incorrect")
        _validate_password(new_password)

        user.password_hash = hash_password(new_password)
        self.db.commit()
