from __future__ import annotations

import logging

from sqlalchemy.orm import Session, selectinload

from resumate.core.auth import RequestContext
from resumate.core.ownership import authorize_owner, via_user
from resumate.core.pagination import Page, PageParams, paginate
from resumate.db.models import Application, ApplicationResume, ApplicationStatus
from resumate.repositories.jobs import JobRepository
from resumate.schemas.application import ApplicationCreate
from resumate.utils.logging import log_context

logger = logging.getLogger(__name__)


class ApplicationRepository:
    def __init__(self, db: Session, ctx: RequestContext):
        self.db = db
        self.ctx = ctx

    def list(self, params: PageParams) -> Page:
        query = (
            self.db.query(Application)
            .options(selectinload(Application.resumes).selectinload(ApplicationResume.resume))
            .filter(Application.user_id == self.ctx.user_id)
        )
        return paginate(query, Application.created_at, Application.id, params)

    def create(self, payload: ApplicationCreate) -> Application:
        """Track a new application, copying the job fields onto the row.

        When ``jobId`` is given the stored job fills any field ``jobInfo`` leaves out.
        """
        info = payload.job_info
        job = None
        if payload.job_id:
            job = JobRepository(self.db, self.ctx).get(payload.job_id)

        application = Application(
            user_id=self.ctx.user_id,
            job_id=job.id if job is not None else None,
            company=info.company_name or (job.company_name if job else None) or "",
            position=info.position or (job.title if job else None) or "",
            job_description=info.description or (job.description if job else None),
            requirements=list(info.requirements or (job.requirements if job else None) or []),
            cover_letter_url=payload.cover_letter_url,
            status=ApplicationStatus.PENDING,
        )
        self.db.add(application)
        self.db.commit()
        self.db.refresh(application)
        logger.info(
            "Created application %s for user %s",
            application.id,
            self.ctx.user_id,
            extra=log_context(self.ctx.user_id, "application", application.id),
        )
        return application

    def get(self, application_id: str) -> Application:
        record = self.db.get(Application, application_id)
        return authorize_owner(record, self.ctx, via_user, label="Application")

    def set_status(self, application_id: str, status: ApplicationStatus) -> Application:
        application = self.get(application_id)
        application.status = status
        self.db.commit()
        self.db.refresh(application)
        logger.info(
            "Application %s status -> %s",
            application_id,
            status.value,
            extra=log_context(self.ctx.user_id, "application", application_id),
        )
        return application

    def delete(self, application_id: str) -> None:
        application = self.get(application_id)
        self.db.delete(application)
        self.db.commit()
