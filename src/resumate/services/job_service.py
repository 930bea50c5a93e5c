"""Job ingestion: pasted text or a URL in, normalized job fields out."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Literal, Optional

import requests
from bs4 import BeautifulSoup
from sqlalchemy.orm import Session

from resumate.core import prompts
from resumate.core.llm_client import LLMClient, call_llm_json
from resumate.errors import UpstreamError
from resumate.repositories.jobs import find_by_url
from resumate.db.models import Job
from resumate.schemas.common import iso
from resumate.settings import Settings, get_settings

logger = logging.getLogger(__name__)

UrlFetcher = Callable[[str], str]

_USER_AGENT = "Mozilla/5.0 (compatible; ResuMate/0.3; +https://resumate.app)"


def fetch_url_text(url: str, *, timeout: float | None = None) -> str:
    """Fetch a page and return its readable text.

    Raises:
        UpstreamError: When the request fails or the page has no text.
    """
    timeout = timeout if timeout is not None else get_settings().fetch_timeout_s
    try:
        resp = requests.get(url, timeout=timeout, headers={"User-Agent": _USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        raise UpstreamError(
            f"Failed to fetch job posting from URL: {exc}", status_code=400
        ) from exc

    soup = BeautifulSoup(resp.text, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    main = soup.find("main") or soup.find("article") or soup.find("body") or soup
    text = main.get_text(separator="\n", strip=True)
    if not text:
        raise UpstreamError("Failed to fetch job posting from URL: page has no text", status_code=400)
    return text


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number_or_none(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = "".join(ch for ch in str(value) if ch.isdigit() or ch == ".")
    try:
        return float(cleaned) if cleaned else None
    except ValueError:
        return None


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split("\n")
    if not isinstance(value, list):
        return []
    return [s for s in (str(v).strip().lstrip("-*• ").strip() for v in value if v is not None) if s]


def _date_or_none(value: Any) -> Optional[str]:
    text = _str_or_none(value)
    if text is None:
        return None
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return text


def normalize_job_fields(data: Dict[str, Any], *, url: Optional[str] = None) -> Dict[str, Any]:
    """Coerce model output into the fixed job shape; absent optionals become None."""
    return {
        "url": url,
        "companyName": _str_or_none(data.get("companyName")),
        "position": _str_or_none(data.get("position") or data.get("title")),
        "description": _str_or_none(data.get("description")),
        "duties": _string_list(data.get("duties")),
        "requirements": _string_list(data.get("requirements")),
        "salaryMin": _number_or_none(data.get("salaryMin")),
        "salaryMax": _number_or_none(data.get("salaryMax")),
        "location": _str_or_none(data.get("location")),
        "postingDate": _date_or_none(data.get("postingDate")),
        "applicationDeadline": _date_or_none(data.get("applicationDeadline")),
        "applicationInstructions": _str_or_none(data.get("applicationInstructions")),
        "applicationWebsite": _str_or_none(data.get("applicationWebsite")),
    }


def job_to_fields(job: Job) -> Dict[str, Any]:
    return {
        "id": job.id,
        "url": job.url,
        "companyName": job.company_name,
        "position": job.title,
        "description": job.description,
        "duties": list(job.duties or []),
        "requirements": list(job.requirements or []),
        "salaryMin": job.salary_min,
        "salaryMax": job.salary_max,
        "location": job.location,
        "postingDate": iso(job.posting_date),
        "applicationDeadline": iso(job.application_deadline),
        "applicationInstructions": job.application_instructions,
        "applicationWebsite": job.application_website,
    }


class JobIngestionService:
    def __init__(
        self,
        db: Session,
        llm: LLMClient,
        fetcher: UrlFetcher | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.llm = llm
        self.fetcher = fetcher or fetch_url_text
        self.settings = settings or get_settings()

    def analyze(self, content: str, type: Literal["text", "url"]) -> Dict[str, Any]:
        """Extract structured job fields from a posting.

        Args:
            content: Posting text, or the posting URL when ``type`` is "url".
            type: "text" or "url".

        Returns:
            Normalized job fields (camelCase keys).
        """
        url: Optional[str] = None
        if type == "url":
            url = content.strip()
            existing = find_by_url(self.db, url)
            if existing is not None:
                logger.info("Job for %s already stored (%s); skipping analysis", url, existing.id)
                return job_to_fields(existing)
            text = self.fetcher(url)
        else:
            text = content

        try:
            data = call_llm_json(
                self.llm,
                prompts.job_analysis_user(text),
                model=self.settings.job_model,
                system_prompt=prompts.JOB_ANALYSIS_SYSTEM,
            )
        except UpstreamError as exc:
            # Bad postings and unusable model output are reported to the client as 400.
            raise UpstreamError(f"Failed to process job: {exc.message}", status_code=400) from exc
        return normalize_job_fields(data, url=url)
