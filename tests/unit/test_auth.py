from datetime import timedelta

import jwt
import pytest

from resumate.core.auth import decode_session_token, issue_session_token, resolve_context
from resumate.db.models import User
from resumate.errors import UnauthenticatedError
from resumate.settings import get_settings


def test_resolve_context_provisions_user(db) -> None:
    token = issue_session_token("user-x", "x@example.com")
    ctx = resolve_context(db, token)
    assert ctx.user_id == "user-x"
    assert db.get(User, "user-x").email == "x@example.com"

    ctx = resolve_context(db, issue_session_token("user-x", "new@example.com"))
    assert ctx.email == "new@example.com"
    assert db.query(User).count() == 1


def test_expired_token_is_rejected() -> None:
    token = issue_session_token("user-x", "x@example.com", expires_in=timedelta(seconds=-5))
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token)


def test_wrong_secret_is_rejected() -> None:
    token = jwt.encode({"sub": "user-x", "email": "x@example.com"}, "other-secret", algorithm="HS256")
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token)


def test_token_needs_an_email() -> None:
    settings = get_settings()
    token = jwt.encode({"sub": "user-x"}, settings.session_secret, algorithm=settings.session_algorithm)
    with pytest.raises(UnauthenticatedError):
        decode_session_token(token)


def test_missing_token_is_rejected(db) -> None:
    with pytest.raises(UnauthenticatedError):
        resolve_context(db, None)
