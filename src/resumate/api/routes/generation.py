"""LLM-backed document generation. Every route answers with a PDF attachment."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_llm_client, get_pdf_renderer, get_request_context
from resumate.core.auth import RequestContext
from resumate.core.llm_client import LLMClient
from resumate.render.pdf import PdfRenderer
from resumate.repositories.jobs import JobRepository
from resumate.repositories.profiles import require_profile
from resumate.schemas.application import JobInfo
from resumate.schemas.resume import GenerateResumeRequest, PrintResumeRequest
from resumate.services.cover_letter_service import CoverLetterService
from resumate.services.job_service import job_to_fields
from resumate.services.resume_service import ResumeGenerationService, reprint_pdf

router = APIRouter(prefix="/api", tags=["generation"])

RESUME_FILENAME = "tailored-resume.pdf"
COVER_LETTER_FILENAME = "cover-letter.pdf"


def _pdf_response(data: bytes, filename: str, headers: Optional[Dict[str, str]] = None) -> Response:
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"', **(headers or {})},
    )


def _job_info(
    db: Session, ctx: RequestContext, payload: GenerateResumeRequest
) -> Optional[Dict[str, Any]]:
    info: Dict[str, Any] = {}
    if payload.job_id:
        info.update(job_to_fields(JobRepository(db, ctx).get(payload.job_id)))
    if payload.job_info is not None:
        supplied = payload.job_info.model_dump(by_alias=True, exclude_none=True)
        if not supplied.get("requirements"):
            supplied.pop("requirements", None)
        info.update(supplied)
    return info or None


@router.post("/resumes/generate")
@router.post("/generate-resume")
def generate_resume(
    payload: GenerateResumeRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    """Generate a tailored resume, store it and return its PDF.

    The new resume's id is returned in the ``X-Resume-Id`` header.

    Args:
        payload: ``{applicationId?, jobId?, jobInfo?}``.
        ctx: Caller identity.
        db: Database session.
        llm: LLM client.
        renderer: PDF renderer.
    """
    profile = require_profile(db, ctx, full=True)
    service = ResumeGenerationService(db, ctx, llm, renderer)
    doc = service.generate(profile, _job_info(db, ctx, payload), application_id=payload.application_id)
    return _pdf_response(doc.pdf, RESUME_FILENAME, {"X-Resume-Id": doc.resume.id})


@router.post("/generate-cover-letter")
def generate_cover_letter(
    payload: JobInfo,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    """Write a cover letter for the posted job fields and return it as a PDF.

    Args:
        payload: Job fields (``companyName``, ``position``, ``description``, ``requirements``).
        ctx: Caller identity.
        db: Database session.
        llm: LLM client.
        renderer: PDF renderer.
    """
    profile = require_profile(db, ctx, full=True)
    pdf = CoverLetterService(llm, renderer).generate(profile, payload.model_dump(by_alias=True))
    return _pdf_response(pdf, COVER_LETTER_FILENAME)


@router.post("/resumes/reprint")
@router.post("/reprint-resume")
def reprint_resume(
    payload: PrintResumeRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    """Render stored resume content again, filling contact details from the profile."""
    profile = require_profile(db, ctx, full=True)
    return _pdf_response(reprint_pdf(renderer, payload.resume_content, profile), RESUME_FILENAME)


@router.post("/resumes/print")
def print_resume(
    payload: PrintResumeRequest,
    ctx: RequestContext = Depends(get_request_context),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
):
    """Render resume content exactly as given."""
    return _pdf_response(reprint_pdf(renderer, payload.resume_content), RESUME_FILENAME)
