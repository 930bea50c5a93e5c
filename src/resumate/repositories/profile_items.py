"""Ownership-scoped CRUD for the records hanging off a Profile.

Experience, education, certifications and projects share one repository
class; each kind only names its model, its ordering column and its label.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from resumate.core.auth import RequestContext
from resumate.core.ownership import authorize_owner, via_profile
from resumate.core.pagination import Page, PageParams, paginate
from resumate.db.models import Certification, Education, Experience, Project
from resumate.errors import NotFoundError
from resumate.repositories.profiles import require_profile
from resumate.schemas.profile_items import CertificationIn, EducationIn, ExperienceIn, ProjectIn
from resumate.utils.logging import log_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileItemKind:
    name: str
    label: str
    model: Type[Any]
    schema: Type[BaseModel]
    order_attr: str


KINDS: Dict[str, ProfileItemKind] = {
    "experience": ProfileItemKind("experience", "Experience", Experience, ExperienceIn, "start_date"),
    "education": ProfileItemKind("education", "Education", Education, EducationIn, "start_date"),
    "certification": ProfileItemKind(
        "certification", "Certification", Certification, CertificationIn, "issue_date"
    ),
    "project": ProfileItemKind("project", "Project", Project, ProjectIn, "start_date"),
}


def get_kind(name: str) -> ProfileItemKind:
    kind = KINDS.get(name)
    if kind is None:
        raise NotFoundError(f"Unknown profile section: {name}")
    return kind


class ProfileItemRepository:
    def __init__(self, db: Session, ctx: RequestContext, kind: ProfileItemKind):
        self.db = db
        self.ctx = ctx
        self.kind = kind

    def list(self, params: PageParams) -> Page:
        profile = require_profile(self.db, self.ctx)
        model = self.kind.model
        query = self.db.query(model).filter(model.profile_id == profile.id)
        return paginate(query, getattr(model, self.kind.order_attr), model.id, params)

    def create(self, payload: BaseModel) -> Any:
        profile = require_profile(self.db, self.ctx)
        record = self.kind.model(profile_id=profile.id, **payload.model_dump())
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        logger.info(
            "Created %s %s for user %s",
            self.kind.name,
            record.id,
            self.ctx.user_id,
            extra=log_context(self.ctx.user_id, self.kind.name, record.id),
        )
        return record

    def get(self, record_id: str) -> Any:
        record = self.db.get(self.kind.model, record_id)
        return authorize_owner(record, self.ctx, via_profile, label=self.kind.label)

    def update(self, record_id: str, payload: BaseModel) -> Any:
        record = self.get(record_id)
        for field, value in payload.model_dump().items():
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        self.db.delete(record)
        self.db.commit()
        logger.info(
            "Deleted %s %s for user %s",
            self.kind.name,
            record_id,
            self.ctx.user_id,
            extra=log_context(self.ctx.user_id, self.kind.name, record_id),
        )
