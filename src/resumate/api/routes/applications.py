from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_page_params, get_request_context
from resumate.api.serializers import application_to_dict, page_to_dict
from resumate.core.auth import RequestContext
from resumate.core.pagination import PageParams
from resumate.repositories.applications import ApplicationRepository
from resumate.schemas.application import ApplicationCreate, ApplicationStatusUpdate

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.get("")
def list_applications(
    ctx: RequestContext = Depends(get_request_context),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List the caller's applications, newest first, with linked resumes.

    Args:
        ctx: Caller identity.
        params: Pagination parameters.
        db: Database session.
    """
    return page_to_dict(ApplicationRepository(db, ctx).list(params), application_to_dict)


@router.post("")
def create_application(
    payload: ApplicationCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return application_to_dict(ApplicationRepository(db, ctx).create(payload))


@router.get("/{application_id}")
def read_application(
    application_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return application_to_dict(ApplicationRepository(db, ctx).get(application_id))


@router.patch("/{application_id}")
def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Change an application's status; no other field can be patched.

    Args:
        application_id: Application identifier.
        payload: ``{status}``.
        ctx: Caller identity.
        db: Database session.
    """
    application = ApplicationRepository(db, ctx).set_status(application_id, payload.status)
    return application_to_dict(application)


@router.delete("/{application_id}")
def delete_application(
    application_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    ApplicationRepository(db, ctx).delete(application_id)
    return {"success": True}
