from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from resumate.schemas.common import ApiModel, OptionalDate, OptionalUrl


class JobIn(ApiModel):
    url: OptionalUrl = None
    title: Optional[str] = None
    company_name: Optional[str] = None
    description: Optional[str] = None
    duties: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    location: Optional[str] = None
    posting_date: OptionalDate = None
    application_deadline: OptionalDate = None
    application_instructions: Optional[str] = None
    application_website: OptionalUrl = None


class ProcessJobRequest(ApiModel):
    type: Literal["text", "url"]
    content: str = Field(min_length=1)
