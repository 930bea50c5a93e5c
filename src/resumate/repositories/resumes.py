from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from resumate.core.auth import RequestContext
from resumate.core.ownership import authorize_owner, via_user
from resumate.core.pagination import Page, PageParams, paginate
from resumate.db.models import (
    Application,
    ApplicationResume,
    Resume,
    ResumeCertification,
    ResumeEducation,
    ResumeSkill,
    ResumeWorkExperience,
)
from resumate.db.utils import atomic, replace_children
from resumate.schemas.resume import (
    CertificationEntry,
    EducationEntry,
    ResumeIn,
    SkillEntry,
    WorkExperienceEntry,
)
from resumate.utils.logging import log_context

logger = logging.getLogger(__name__)

_SCALAR_FIELDS = (
    "title",
    "professional_title",
    "first_name",
    "last_name",
    "email",
    "phone",
    "location",
    "website",
    "linkedin",
    "github",
    "summary",
)


def _work_rows(items: Iterable[WorkExperienceEntry]) -> List[ResumeWorkExperience]:
    return [
        ResumeWorkExperience(
            company=item.company,
            position=item.position,
            start_date=item.start_date,
            end_date=None if item.is_current else item.end_date,
            descriptions=list(item.descriptions),
            is_current=item.is_current,
        )
        for item in items
    ]


def _education_rows(items: Iterable[EducationEntry]) -> List[ResumeEducation]:
    return [
        ResumeEducation(
            institution=item.institution,
            degree=item.degree,
            field=item.field,
            start_date=item.start_date,
            end_date=item.end_date,
        )
        for item in items
    ]


def _certification_rows(items: Iterable[CertificationEntry]) -> List[ResumeCertification]:
    return [
        ResumeCertification(
            name=item.name,
            issuer=item.issuer,
            issue_date=item.issue_date,
            expiry_date=item.expiry_date,
        )
        for item in items
    ]


def _skill_rows(items: Iterable[SkillEntry]) -> List[ResumeSkill]:
    return [ResumeSkill(name=item.name) for item in items]


class ResumeRepository:
    def __init__(self, db: Session, ctx: RequestContext):
        self.db = db
        self.ctx = ctx

    def _loaded(self):
        return self.db.query(Resume).options(
            selectinload(Resume.work_experiences),
            selectinload(Resume.educations),
            selectinload(Resume.certifications),
            selectinload(Resume.skills),
        )

    def list(self, params: PageParams) -> Page:
        query = self.db.query(Resume).filter(Resume.user_id == self.ctx.user_id)
        return paginate(query, Resume.updated_at, Resume.id, params)

    def create(
        self,
        payload: ResumeIn,
        *,
        content: Optional[Dict[str, Any]] = None,
        application: Optional[Application] = None,
    ) -> Resume:
        """Insert a resume with all of its child rows in one transaction.

        Args:
            payload: Validated resume fields and nested lists.
            content: Raw structured content to keep alongside the rows.
            application: Owned application to link the new resume to.

        Returns:
            The persisted resume.
        """
        with atomic(self.db):
            resume = Resume(user_id=self.ctx.user_id)
            for field in _SCALAR_FIELDS:
                setattr(resume, field, getattr(payload, field))
            resume.content = content if content is not None else payload.content
            self.db.add(resume)
            self.db.flush()
            replace_children(self.db, resume, "work_experiences", _work_rows(payload.work_experiences))
            replace_children(self.db, resume, "educations", _education_rows(payload.educations))
            replace_children(
                self.db, resume, "certifications", _certification_rows(payload.certifications)
            )
            replace_children(self.db, resume, "skills", _skill_rows(payload.skills))
            if application is not None:
                self.db.add(ApplicationResume(application_id=application.id, resume_id=resume.id))
        logger.info(
            "Created resume %s for user %s",
            resume.id,
            self.ctx.user_id,
            extra=log_context(self.ctx.user_id, "resume", resume.id),
        )
        return self.get(resume.id)

    def get(self, resume_id: str) -> Resume:
        record = self._loaded().filter(Resume.id == resume_id).first()
        return authorize_owner(record, self.ctx, via_user, label="Resume")

    def update(self, resume_id: str, payload: ResumeIn) -> Resume:
        resume = self.get(resume_id)
        with atomic(self.db):
            for field in _SCALAR_FIELDS:
                setattr(resume, field, getattr(payload, field))
            if payload.content is not None:
                resume.content = payload.content
            resume.updated_at = datetime.utcnow()
            replace_children(self.db, resume, "work_experiences", _work_rows(payload.work_experiences))
            replace_children(self.db, resume, "educations", _education_rows(payload.educations))
            replace_children(
                self.db, resume, "certifications", _certification_rows(payload.certifications)
            )
            replace_children(self.db, resume, "skills", _skill_rows(payload.skills))
        self.db.expire(resume)
        return self.get(resume_id)

    def delete(self, resume_id: str) -> None:
        resume = self.get(resume_id)
        self.db.delete(resume)
        self.db.commit()
        logger.info("Deleted resume %s", resume_id, extra=log_context(self.ctx.user_id, "resume", resume_id))
