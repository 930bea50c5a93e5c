from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resumate.api.deps import get_db, get_page_params, get_request_context
from resumate.api.serializers import job_to_dict, page_to_dict
from resumate.core.auth import RequestContext
from resumate.core.pagination import PageParams
from resumate.repositories.jobs import JobRepository
from resumate.schemas.job import JobIn

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("")
def list_jobs(
    ctx: RequestContext = Depends(get_request_context),
    params: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
):
    """List jobs linked to the caller, newest first.

    Args:
        ctx: Caller identity.
        params: Pagination parameters.
        db: Database session.
    """
    return page_to_dict(JobRepository(db, ctx).list(params), job_to_dict)


@router.post("")
def create_job(
    payload: JobIn,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Store a job; a known URL returns the existing job instead of a duplicate.

    Args:
        payload: Request payload.
        ctx: Caller identity.
        db: Database session.
    """
    return job_to_dict(JobRepository(db, ctx).create(payload))


@router.get("/{job_id}")
def read_job(
    job_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return job_to_dict(JobRepository(db, ctx).get(job_id))


@router.put("/{job_id}")
def update_job(
    job_id: str,
    payload: JobIn,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    return job_to_dict(JobRepository(db, ctx).update(job_id, payload))


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    JobRepository(db, ctx).delete(job_id)
    return {"success": True, "id": job_id}


@router.post("/{job_id}/user-link")
@router.post("/{job_id}/link-user")
def link_job(
    job_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Link the caller to an existing job. Linking twice is a no-op.

    Args:
        job_id: Job identifier.
        ctx: Caller identity.
        db: Database session.
    """
    job, created = JobRepository(db, ctx).link(job_id)
    if not created:
        return {"message": "Job already linked to user", "jobId": job.id}
    return {"message": "Job linked to user successfully", "jobId": job.id}


@router.delete("/{job_id}/user-link")
def unlink_job(
    job_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    JobRepository(db, ctx).unlink(job_id)
    return {"message": "Job unlinked from user successfully"}
