from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resumate.core.auth import RequestContext
from resumate.core.ownership import authorize_owner
from resumate.core.pagination import Page, PageParams, paginate
from resumate.db.models import Job, JobUser
from resumate.errors import NotFoundError, ResuMateError
from resumate.schemas.job import JobIn
from resumate.utils.logging import log_context

logger = logging.getLogger(__name__)


def _linked_to(ctx: RequestContext):
    def owner_of(job: Job) -> str | None:
        return ctx.user_id if any(link.user_id == ctx.user_id for link in job.user_links) else None

    return owner_of


def find_by_url(db: Session, url: str | None) -> Job | None:
    if not url:
        return None
    return db.query(Job).filter(Job.url == url).first()


class JobRepository:
    def __init__(self, db: Session, ctx: RequestContext):
        self.db = db
        self.ctx = ctx

    def list(self, params: PageParams) -> Page:
        query = (
            self.db.query(Job)
            .join(JobUser, JobUser.job_id == Job.id)
            .filter(JobUser.user_id == self.ctx.user_id)
        )
        return paginate(query, Job.created_at, Job.id, params)

    def create(self, payload: JobIn) -> Job:
        """Insert a job, or return the stored one when its URL is already known.

        Either way the caller ends up linked to the returned job.
        """
        existing = find_by_url(self.db, payload.url)
        if existing is not None:
            logger.info("Job with url %s already exists (%s)", payload.url, existing.id)
            self._ensure_link(existing)
            return existing

        job = Job(**payload.model_dump())
        self.db.add(job)
        try:
            self.db.flush()
        except IntegrityError:
            # Lost a race on the unique url; fall back to the winner.
            self.db.rollback()
            existing = find_by_url(self.db, payload.url)
            if existing is None:
                raise
            self._ensure_link(existing)
            return existing
        self.db.add(JobUser(job_id=job.id, user_id=self.ctx.user_id))
        self.db.commit()
        self.db.refresh(job)
        logger.info("Created job %s", job.id, extra=log_context(self.ctx.user_id, "job", job.id))
        return job

    def get(self, job_id: str) -> Job:
        return authorize_owner(self.db.get(Job, job_id), self.ctx, _linked_to(self.ctx), label="Job")

    def update(self, job_id: str, payload: JobIn) -> Job:
        job = self.get(job_id)
        data = payload.model_dump()
        if data.get("url") and data["url"] != job.url:
            other = find_by_url(self.db, data["url"])
            if other is not None and other.id != job.id:
                raise ResuMateError("A job with this URL already exists", status_code=400)
        for field, value in data.items():
            setattr(job, field, value)
        self.db.commit()
        self.db.refresh(job)
        return job

    def delete(self, job_id: str) -> None:
        """Remove the caller's link; the job row goes once nobody links to it."""
        job = self.get(job_id)
        for link in list(job.user_links):
            if link.user_id == self.ctx.user_id:
                job.user_links.remove(link)
        self.db.flush()
        if not job.user_links:
            self.db.delete(job)
            logger.info("Deleted job %s", job_id, extra=log_context(self.ctx.user_id, "job", job_id))
        self.db.commit()

    def link(self, job_id: str) -> tuple[Job, bool]:
        job = self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        created = self._ensure_link(job)
        return job, created

    def unlink(self, job_id: str) -> None:
        if self.db.get(Job, job_id) is None:
            raise NotFoundError("Job not found")
        link = (
            self.db.query(JobUser)
            .filter(JobUser.job_id == job_id, JobUser.user_id == self.ctx.user_id)
            .first()
        )
        if link is None:
            raise NotFoundError("Job not linked to user")
        self.db.delete(link)
        self.db.commit()

    def _ensure_link(self, job: Job) -> bool:
        if any(link.user_id == self.ctx.user_id for link in job.user_links):
            return False
        job.user_links.append(JobUser(user_id=self.ctx.user_id))
        self.db.commit()
        return True
