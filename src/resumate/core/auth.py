from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from sqlalchemy.orm import Session

from resumate.db.models import User
from resumate.errors import UnauthenticatedError
from resumate.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, passed explicitly into repositories and services."""

    user_id: str
    email: str


def issue_session_token(
    user_id: str,
    email: str,
    *,
    settings: Settings | None = None,
    expires_in: timedelta = timedelta(hours=12),
) -> str:
    """Sign a session token the same way the identity provider does."""
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    claims = {"sub": user_id, "email": email, "iat": now, "exp": now + expires_in}
    return jwt.encode(claims, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str, *, settings: Settings | None = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
            options={"require": ["sub"]},
        )
    except jwt.PyJWTError as exc:
        logger.warning("Rejected session token: %s", exc)
        raise UnauthenticatedError() from exc
    if not claims.get("email"):
        raise UnauthenticatedError()
    return claims


def resolve_context(db: Session, token: str | None, *, settings: Settings | None = None) -> RequestContext:
    """Turn a raw session token into a RequestContext.

    The identity provider owns accounts; a local User row is provisioned the
    first time a valid session for it is seen.

    Args:
        db: Database session.
        token: Bearer or cookie token, or None.
        settings: Optional settings override.

    Returns:
        RequestContext for the caller.
    """
    if not token:
        raise UnauthenticatedError()
    claims = decode_session_token(token, settings=settings)
    user_id = str(claims["sub"])
    email = str(claims["email"])

    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, email=email, name=claims.get("name"))
        db.add(user)
        db.commit()
        logger.info("Provisioned user %s", user_id)
    elif user.email != email:
        user.email = email
        db.commit()
    return RequestContext(user_id=user.id, email=user.email)
