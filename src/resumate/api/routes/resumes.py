from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_llm_client, get_page_params, get_request_context
from resumate.api.serializers import page_to_dict, resume_summary_to_dict, resume_to_dict
from resumate.core.auth import RequestContext
from resumate.core.llm_client import LLMClient
from resumate.core.pagination import PageParams
from resumate.repositories.resumes import ResumeRepository
from resumate.schemas.resume import ResumeIn, SuggestionsRequest
from resumate.services.resume_service import ResumeGenerationService

router = APIRouter(prefix="/api/resumes", tags=["resumes"])


@router.get("")
def list_resumes(
    ctx: RequestContext = Depends(get_request_context),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List the caller's resumes, most recently updated first.

    Args:
        ctx: Caller identity.
        params: Pagination parameters.
        db: Database session.
    """
    return page_to_dict(ResumeRepository(db, ctx).list(params), resume_summary_to_dict)


@router.post("")
def create_resume(
    payload: ResumeIn,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return resume_to_dict(ResumeRepository(db, ctx).create(payload))


@router.get("/{resume_id}")
def read_resume(
    resume_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return resume_to_dict(ResumeRepository(db, ctx).get(resume_id))


@router.put("/{resume_id}")
def update_resume(
    resume_id: str,
    payload: ResumeIn,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Replace a resume's fields; every nested list is replaced as a whole.

    Args:
        resume_id: Resume identifier.
        payload: Full resume body.
        ctx: Caller identity.
        db: Database session.
    """
    return resume_to_dict(ResumeRepository(db, ctx).update(resume_id, payload))


@router.delete("/{resume_id}")
def delete_resume(
    resume_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    ResumeRepository(db, ctx).delete(resume_id)
    return {"success": True, "id": resume_id}


@router.post("/{resume_id}/suggestions")
def resume_suggestions(
    resume_id: str,
    payload: SuggestionsRequest | None = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
):
    resume = ResumeRepository(db, ctx).get(resume_id)
    job_info = payload.job_info.model_dump(by_alias=True) if payload and payload.job_info else None
    service = ResumeGenerationService(db, ctx, llm)
    return {"suggestions": service.suggestions(resume, job_info)}
