"""Request bodies for the date-ranged profile records."""

from __future__ import annotations

from typing import ClassVar, List, Optional

from pydantic import Field, model_validator

from resumate.schemas.common import ApiModel, DateValue, OptionalDate, OptionalUrl


class _DateRanged(ApiModel):
    start_date: DateValue
    end_date: OptionalDate = None

    # Subclasses name their "ongoing" flag.
    current_flag: ClassVar[str] = "currently_working"
    current_label: ClassVar[str] = "currently working"

    @model_validator(mode="after")
    def _sync_end_date(self):
        if getattr(self, self.current_flag):
            self.end_date = None
        elif self.end_date is None:
            raise ValueError(f"End date is required when not {self.current_label}")
        return self


class ExperienceIn(_DateRanged):
    company: str = Field(min_length=1)
    position: str = Field(min_length=1)
    currently_working: bool = False
    description: Optional[str] = None


class EducationIn(_DateRanged):
    current_flag: ClassVar[str] = "currently_studying"
    current_label: ClassVar[str] = "currently studying"

    institution: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    field: str = Field(min_length=1)
    currently_studying: bool = False
    description: Optional[str] = None


class ProjectIn(_DateRanged):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    currently_working: bool = False
    technologies: List[str] = Field(default_factory=list)
    project_url: OptionalUrl = None
    github_url: OptionalUrl = None


class CertificationIn(ApiModel):
    name: str = Field(min_length=1)
    issuer: str = Field(min_length=1)
    issue_date: DateValue
    expiry_date: OptionalDate = None
    credential_id: Optional[str] = None
    credential_url: OptionalUrl = None
    description: Optional[str] = None
