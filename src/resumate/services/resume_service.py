"""Resume generation: profile (+ job) -> LLM -> persisted Resume -> PDF."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from resumate.core import prompts
from resumate.core.auth import RequestContext
from resumate.core.llm_client import LLMClient, call_llm_json
from resumate.db.models import Profile, Resume
from resumate.errors import UpstreamError
from resumate.render.pdf import PdfRenderer
from resumate.render.template import render_resume_html
from resumate.repositories.applications import ApplicationRepository
from resumate.repositories.resumes import ResumeRepository
from resumate.schemas.resume import GeneratedResume, ResumeIn
from resumate.settings import Settings, get_settings
from resumate.utils.logging import log_context

logger = logging.getLogger(__name__)

CURRENT_ROLE_BULLETS = 5
OTHER_ROLE_BULLETS = 3

_LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s*")


@dataclass
class GeneratedDocument:
    resume: Resume
    pdf: bytes


def profile_snapshot(profile: Profile) -> Dict[str, Any]:
    """Flatten a loaded profile into the dict the prompts embed."""
    first = profile.preferred_first_name or profile.legal_first_name
    last = profile.preferred_last_name or profile.legal_last_name
    return {
        "firstName": first,
        "lastName": last,
        "email": profile.user.email if profile.user is not None else None,
        "title": profile.title,
        "bio": profile.bio,
        "phone": profile.phone,
        "location": profile.location,
        "website": profile.website,
        "linkedin": profile.linkedin,
        "github": profile.github,
        "skills": [s.name for s in profile.skills],
        "experience": [
            {
                "company": e.company,
                "position": e.position,
                "startDate": e.start_date,
                "endDate": e.end_date,
                "description": e.description,
            }
            for e in sorted(profile.experience, key=lambda e: e.start_date, reverse=True)
        ],
        "education": [
            {
                "institution": e.institution,
                "degree": e.degree,
                "field": e.field,
                "startDate": e.start_date,
                "endDate": e.end_date,
            }
            for e in sorted(profile.education, key=lambda e: e.start_date, reverse=True)
        ],
        "certifications": [
            {
                "name": c.name,
                "issuer": c.issuer,
                "issueDate": c.issue_date,
                "expiryDate": c.expiry_date,
            }
            for c in sorted(profile.certifications, key=lambda c: c.issue_date, reverse=True)
        ],
    }


def cap_bullets(resume: GeneratedResume) -> GeneratedResume:
    for idx, exp in enumerate(resume.work_experiences):
        limit = CURRENT_ROLE_BULLETS if idx == 0 or exp.is_current else OTHER_ROLE_BULLETS
        if len(exp.descriptions) > limit:
            exp.descriptions = exp.descriptions[:limit]
    return resume


def fill_contact(resume: GeneratedResume, snapshot: Dict[str, Any]) -> GeneratedResume:
    """Use profile contact details wherever the content left them blank."""
    mapping = {
        "first_name": "firstName",
        "last_name": "lastName",
        "email": "email",
        "phone": "phone",
        "location": "location",
        "website": "website",
        "linkedin": "linkedin",
        "github": "github",
        "professional_title": "title",
    }
    for attr, key in mapping.items():
        if not getattr(resume, attr) and snapshot.get(key):
            setattr(resume, attr, snapshot[key])
    return resume


def parse_generated(data: Dict[str, Any]) -> GeneratedResume:
    try:
        return GeneratedResume.model_validate(data)
    except ValidationError as exc:
        logger.warning("Resume content failed validation: %s", exc)
        raise UpstreamError(f"Resume content has an unexpected shape: {exc.error_count()} error(s)") from exc


def resume_to_generated(resume: Resume) -> GeneratedResume:
    """Rebuild structured content from a stored resume's rows."""
    return GeneratedResume.model_validate(
        {
            "title": resume.title,
            "professional_title": resume.professional_title,
            "first_name": resume.first_name,
            "last_name": resume.last_name,
            "email": resume.email,
            "phone": resume.phone,
            "location": resume.location,
            "website": resume.website,
            "linkedin": resume.linkedin,
            "github": resume.github,
            "summary": resume.summary or "",
            "work_experiences": [
                {
                    "company": w.company,
                    "position": w.position,
                    "start_date": w.start_date,
                    "end_date": w.end_date,
                    "descriptions": list(w.descriptions or []),
                    "is_current": w.is_current,
                }
                for w in resume.work_experiences
            ],
            "educations": [
                {
                    "institution": e.institution,
                    "degree": e.degree,
                    "field": e.field,
                    "start_date": e.start_date,
                    "end_date": e.end_date,
                }
                for e in resume.educations
            ],
            "certifications": [
                {
                    "name": c.name,
                    "issuer": c.issuer,
                    "issue_date": c.issue_date,
                    "expiry_date": c.expiry_date,
                }
                for c in resume.certifications
            ],
            "skills": [{"name": s.name} for s in resume.skills],
        }
    )


def reprint_pdf(
    renderer: PdfRenderer,
    raw: Dict[str, Any],
    profile: Optional[Profile] = None,
    settings: Settings | None = None,
) -> bytes:
    """Render previously generated content again, without calling the LLM."""
    settings = settings or get_settings()
    content = parse_generated(raw)
    if profile is not None:
        fill_contact(content, profile_snapshot(profile))
    return renderer.render(render_resume_html(content), margin=settings.resume_margin)


class ResumeGenerationService:
    def __init__(
        self,
        db: Session,
        ctx: RequestContext,
        llm: LLMClient,
        renderer: PdfRenderer | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.ctx = ctx
        self.llm = llm
        self.renderer = renderer
        self.settings = settings or get_settings()

    def generate_content(
        self, profile: Profile, job_info: Optional[Dict[str, Any]]
    ) -> GeneratedResume:
        snapshot = profile_snapshot(profile)
        data = call_llm_json(
            self.llm,
            prompts.resume_generation_user(snapshot, job_info),
            model=self.settings.resume_model,
            system_prompt=prompts.RESUME_GENERATION_SYSTEM,
        )
        content = cap_bullets(parse_generated(data))
        fill_contact(content, snapshot)
        if job_info and (job_info.get("position") or job_info.get("companyName")):
            content.title = f"Resume for {job_info.get('position')} at {job_info.get('companyName')}"
        elif not content.title:
            content.title = "Resume"
        return content

    def generate(
        self,
        profile: Profile,
        job_info: Optional[Dict[str, Any]],
        *,
        application_id: Optional[str] = None,
    ) -> GeneratedDocument:
        """Generate, persist and render a tailored resume.

        Args:
            profile: The caller's fully loaded profile.
            job_info: Target job fields, or None for a general resume.
            application_id: Application to link the new resume to.

        Returns:
            The persisted resume and its PDF bytes.
        """
        application = None
        if application_id:
            application = ApplicationRepository(self.db, self.ctx).get(application_id)

        content = self.generate_content(profile, job_info)
        payload = ResumeIn.model_validate(content.model_dump())
        resume = ResumeRepository(self.db, self.ctx).create(
            payload,
            content=content.model_dump(mode="json", by_alias=True),
            application=application,
        )
        logger.info(
            "Generated resume %s (%d roles) for user %s",
            resume.id,
            len(content.work_experiences),
            self.ctx.user_id,
            extra=log_context(self.ctx.user_id, "resume", resume.id),
        )
        return GeneratedDocument(resume=resume, pdf=self.render(content))

    def render(self, content: GeneratedResume) -> bytes:
        if self.renderer is None:
            raise RuntimeError("ResumeGenerationService was built without a PdfRenderer")
        return self.renderer.render(render_resume_html(content), margin=self.settings.resume_margin)

    def suggestions(self, resume: Resume, job_info: Optional[Dict[str, Any]]) -> List[str]:
        content = resume_to_generated(resume).model_dump(mode="json", by_alias=True)
        raw = self.llm.complete(
            system_prompt=prompts.RESUME_SUGGESTIONS_SYSTEM,
            user_prompt=prompts.resume_suggestions_user(json.dumps(content, indent=2), job_info),
            model=self.settings.resume_model,
            temperature=0.3,
        )
        if not raw.strip():
            raise UpstreamError("Empty resume suggestions")
        lines = (_LIST_MARKER_RE.sub("", line).strip() for line in raw.splitlines())
        return [line for line in lines if line]
