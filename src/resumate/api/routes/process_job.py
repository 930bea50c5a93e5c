from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_llm_client, get_request_context, get_url_fetcher
from resumate.core.auth import RequestContext
from resumate.core.llm_client import LLMClient
from resumate.schemas.job import ProcessJobRequest
from resumate.services.job_service import JobIngestionService, UrlFetcher

router = APIRouter(prefix="/api", tags=["jobs"])


@router.post("/process-job")
def process_job(
    payload: ProcessJobRequest,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm_client),
    fetcher: UrlFetcher = Depends(get_url_fetcher),
):
    """Extract structured job fields from pasted text or a posting URL.

    Args:
        payload: ``{type, content}``.
        ctx: Caller identity.
        db: Database session.
        llm: LLM client.
        fetcher: URL fetcher for ``type == "url"``.
    """
    service = JobIngestionService(db, llm, fetcher=fetcher)
    return service.analyze(payload.content, payload.type)
