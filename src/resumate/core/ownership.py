"""Single ownership policy shared by every resource.

Each resource supplies how to walk from a record to the owning user id
(record -> profile -> user, record -> user, ...). A missing record is a 404;
a record whose chain does not end at the caller is a 401, whether the chain
breaks (no profile) or points to another user.
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from resumate.core.auth import RequestContext
from resumate.errors import NotFoundError, UnauthorizedError

T = TypeVar("T")

OwnerOf = Callable[[T], Optional[str]]


def via_profile(record) -> Optional[str]:
    profile = getattr(record, "profile", None)
    return profile.user_id if profile is not None else None


def via_user(record) -> Optional[str]:
    return getattr(record, "user_id", None)


def authorize_owner(
    record: Optional[T],
    ctx: RequestContext,
    owner_of: OwnerOf,
    *,
    label: str = "Record",
) -> T:
    if record is None:
        raise NotFoundError(f"{label} not found")
    if owner_of(record) != ctx.user_id:
        raise UnauthorizedError()
    return record
