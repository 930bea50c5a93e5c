from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_page_params, get_request_context
from resumate.api.serializers import PROFILE_ITEM_SERIALIZERS, page_to_dict, profile_to_dict
from resumate.core.auth import RequestContext
from resumate.core.pagination import PageParams
from resumate.errors import ValidationFailedError
from resumate.repositories.profile_items import ProfileItemRepository, get_kind
from resumate.repositories.profiles import get_profile, upsert_profile
from resumate.schemas.profile import ProfileIn

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
def read_profile(
    ctx: RequestContext = Depends(get_request_context), db: Session = Depends(get_db)
):
    """Return the caller's profile, or an empty object when none exists yet.

    Args:
        ctx: Caller identity.
        db: Database session.
    """
    profile = get_profile(db, ctx)
    return profile_to_dict(profile) if profile is not None else {}


@router.post("")
def save_profile(
    payload: ProfileIn,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Create or update the caller's profile.

    Args:
        payload: Request payload.
        ctx: Caller identity.
        db: Database session.
    """
    return profile_to_dict(upsert_profile(db, ctx, payload))


def _validate(kind_name: str, body: dict):
    kind = get_kind(kind_name)
    try:
        return kind, kind.schema.model_validate(body)
    except ValidationError as exc:
        raise ValidationFailedError.from_errors(exc.errors()) from exc


@router.get("/{kind_name}")
def list_items(
    kind_name: str,
    ctx: RequestContext = Depends(get_request_context),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List one section of the caller's profile, newest first.

    Args:
        kind_name: experience, education, certification or project.
        ctx: Caller identity.
        params: Pagination parameters.
        db: Database session.
    """
    kind = get_kind(kind_name)
    page = ProfileItemRepository(db, ctx, kind).list(params)
    return page_to_dict(page, PROFILE_ITEM_SERIALIZERS[kind.name])


@router.post("/{kind_name}")
def create_item(
    kind_name: str,
    body: dict,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kind, payload = _validate(kind_name, body)
    record = ProfileItemRepository(db, ctx, kind).create(payload)
    return PROFILE_ITEM_SERIALIZERS[kind.name](record)


@router.get("/{kind_name}/{item_id}")
def read_item(
    kind_name: str,
    item_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kind = get_kind(kind_name)
    record = ProfileItemRepository(db, ctx, kind).get(item_id)
    return PROFILE_ITEM_SERIALIZERS[kind.name](record)


@router.put("/{kind_name}/{item_id}")
def update_item(
    kind_name: str,
    item_id: str,
    body: dict,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kind, payload = _validate(kind_name, body)
    record = ProfileItemRepository(db, ctx, kind).update(item_id, payload)
    return PROFILE_ITEM_SERIALIZERS[kind.name](record)


@router.delete("/{kind_name}/{item_id}")
def delete_item(
    kind_name: str,
    item_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    kind = get_kind(kind_name)
    ProfileItemRepository(db, ctx, kind).delete(item_id)
    return {"success": True, "id": item_id}
