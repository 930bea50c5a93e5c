from __future__ import annotations

import logging
from typing import Any, Dict

from resumate.core import prompts
from resumate.core.llm_client import LLMClient, strip_code_fences
from resumate.db.models import Profile
from resumate.errors import UpstreamError
from resumate.render.pdf import PdfRenderer
from resumate.render.template import render_cover_letter_html
from resumate.services.resume_service import profile_snapshot
from resumate.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CoverLetterService:
    def __init__(self, llm: LLMClient, renderer: PdfRenderer, settings: Settings | None = None):
        self.llm = llm
        self.renderer = renderer
        self.settings = settings or get_settings()

    def write(self, profile: Profile, job_info: Dict[str, Any]) -> str:
        raw = self.llm.complete(
            system_prompt=prompts.COVER_LETTER_SYSTEM,
            user_prompt=prompts.cover_letter_user(profile_snapshot(profile), job_info),
            model=self.settings.cover_letter_model,
        )
        body = strip_code_fences(raw)
        if not body:
            raise UpstreamError("Empty cover letter")
        return body

    def generate(self, profile: Profile, job_info: Dict[str, Any]) -> bytes:
        html = render_cover_letter_html(self.write(profile, job_info))
        pdf = self.renderer.render(html, margin=self.settings.cover_letter_margin)
        logger.info("Generated cover letter for %s", job_info.get("companyName"))
        return pdf
