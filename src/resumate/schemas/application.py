from __future__ import annotations

from typing import List, Optional

from pydantic import ConfigDict, Field

from resumate.db.models import ApplicationStatus
from resumate.schemas.common import ApiModel


class JobInfo(ApiModel):
    """Structured job fields as returned by /api/process-job."""

    company_name: Optional[str] = None
    position: Optional[str] = None
    description: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)


class ApplicationCreate(ApiModel):
    job_id: Optional[str] = None
    job_info: JobInfo = Field(default_factory=JobInfo)
    cover_letter_url: Optional[str] = None


class ApplicationStatusUpdate(ApiModel):
    model_config = ConfigDict(extra="forbid")

    status: ApplicationStatus
