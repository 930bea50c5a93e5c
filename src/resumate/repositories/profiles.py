from __future__ import annotations

import logging

from sqlalchemy.orm import Session, selectinload

from resumate.core.auth import RequestContext
from resumate.db.models import Profile, Skill
from resumate.db.utils import atomic, replace_children
from resumate.errors import NotFoundError
from resumate.schemas.profile import ProfileIn

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = (
    "legal_first_name",
    "legal_last_name",
    "has_preferred_name",
    "preferred_first_name",
    "preferred_last_name",
    "title",
    "bio",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "location",
    "phone",
    "website",
    "linkedin",
    "github",
)


def get_profile(db: Session, ctx: RequestContext, *, full: bool = False) -> Profile | None:
    query = db.query(Profile).filter(Profile.user_id == ctx.user_id)
    if full:
        query = query.options(
            selectinload(Profile.user),
            selectinload(Profile.skills),
            selectinload(Profile.experience),
            selectinload(Profile.education),
            selectinload(Profile.certifications),
            selectinload(Profile.projects),
        )
    return query.first()


def require_profile(db: Session, ctx: RequestContext, *, full: bool = False) -> Profile:
    profile = get_profile(db, ctx, full=full)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


def upsert_profile(db: Session, ctx: RequestContext, payload: ProfileIn) -> Profile:
    """Create or update the caller's profile; skills are replaced as one unit."""
    with atomic(db):
        profile = get_profile(db, ctx)
        if profile is None:
            profile = Profile(user_id=ctx.user_id)
            db.add(profile)
            logger.info("Creating profile for user %s", ctx.user_id)
        for field in _PROFILE_FIELDS:
            setattr(profile, field, getattr(payload, field))
        db.flush()
        replace_children(db, profile, "skills", [Skill(name=name) for name in payload.skills])
    db.refresh(profile)
    return profile
