"""
Tests for registration, login and profile use cases
"""
import pytest

from app.application.common import AuthenticationError
from app.application.users import (
    RegisterUserUseCase, LoginUseCase, UpdateProfileUseCase, ChangePasswordUseCase, UserValidationError,
)
from app.auth import decode_access_token
from app.domain.category import DEFAULT_CATEGORIES
from app.infrastructure.db.models import CategoryModel


def test_register_seeds_categories_and_issues_token(db_session):
    user, token = RegisterUserUseCase(db_session).execute("Mona", "Mona@Example.com", "secret123")

    assert user.email == "mona@example.com"
    assert user.currency == "EGP"
    assert decode_access_token(token) == user.id
    count = db_session.query(CategoryModel).filter(CategoryModel.user_id == user.id).count()
    assert count == len(DEFAULT_CATEGORIES)


def test_register_validation(db_session):
    uc = RegisterUserUseCase(db_session)
    with pytest.raises(UserValidationError):
        uc.execute("Mona", "not-an-email", "secret123")
    with pytest.raises(UserValidationError):
        uc.execute("Mona", "mona@example.com", "123")
    with pytest.raises(UserValidationError):
        uc.execute("Mona", "mona@example.com", "secret123", preferred_language="fr")

    uc.execute("Mona", "mona@example.com", "secret123")
    with pytest.raises(UserValidationError):
        uc.execute("Other", "MONA@example.com", "secret123")


def test_login(db_session):
    RegisterUserUseCase(db_session).execute("Mona", "mona@example.com", "secret123")

    user, token = LoginUseCase(db_session).execute("mona@example.com", "secret123")
    assert decode_access_token(token) == user.id

    with pytest.raises(AuthenticationError):
        LoginUseCase(db_session).execute("mona@example.com", "wrong-pass")
    with pytest.raises(AuthenticationError):
        LoginUseCase(db_session).execute("nobody@example.com", "secret123")


def test_update_profile(db_session, sample_user_id):
    user = UpdateProfileUseCase(db_session).execute(sample_user_id, preferred_language="ar", currency="usd")
    assert user.preferred_language == "ar"
    assert user.currency == "USD"

    with pytest.raises(UserValidationError):
        UpdateProfileUseCase(db_session).execute(sample_user_id, currency="dollars")


def test_change_password(db_session, sample_user):
    uc = ChangePasswordUseCase(db_session)
    with pytest.raises(UserValidationError):
        uc.execute(sample_user.id, "wrong", "newsecret")

    uc.execute(sample_user.id, "secret123", "newsecret")
    LoginUseCase(db_session).execute(sample_user.email, "newsecret")


def test_invalid_token_decodes_to_none():
    assert decode_access_token("not.a.token") is None
