from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BeforeValidator, Field, field_validator, model_validator

from resumate.db.utils import to_naive_utc
from resumate.schemas.application import JobInfo
from resumate.schemas.common import ApiModel, OptionalDate


def _lenient_date(value: Any) -> Any:
    """Model output dates: accept YYYY, YYYY-MM or ISO strings, drop anything else."""
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if len(text) == 4 and text.isdigit():
        text = f"{text}-01-01"
    elif len(text) == 7 and text[4] == "-":
        text = f"{text}-01"
    try:
        return to_naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


LenientDate = Annotated[Optional[datetime], BeforeValidator(_lenient_date)]


class WorkExperienceEntry(ApiModel):
    company: str = ""
    position: str = ""
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    descriptions: List[str] = Field(default_factory=list)
    is_current: bool = False

    @field_validator("descriptions", mode="before")
    @classmethod
    def _coerce_descriptions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [line for line in (v.strip() for v in value.split("\n")) if line]
        return value

    @model_validator(mode="after")
    def _current_has_no_end(self):
        if self.is_current:
            self.end_date = None
        return self


class EducationEntry(ApiModel):
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: OptionalDate = None
    end_date: OptionalDate = None


class CertificationEntry(ApiModel):
    name: str = ""
    issuer: str = ""
    issue_date: OptionalDate = None
    expiry_date: OptionalDate = None


class SkillEntry(ApiModel):
    name: str = Field(min_length=1)


def _skill_from_string(value: Any) -> Any:
    if isinstance(value, str):
        return {"name": value}
    return value


SkillItem = Annotated[SkillEntry, BeforeValidator(_skill_from_string)]


class ResumeIn(ApiModel):
    """Create/update body. Every nested list is replaced wholesale on update."""

    title: str = Field(min_length=1)
    professional_title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    summary: Optional[str] = None
    content: Optional[Union[Dict[str, Any], str]] = None
    work_experiences: List[WorkExperienceEntry] = Field(default_factory=list)
    educations: List[EducationEntry] = Field(default_factory=list)
    certifications: List[CertificationEntry] = Field(default_factory=list)
    skills: List[SkillItem] = Field(default_factory=list)

    @field_validator("content", mode="before")
    @classmethod
    def _parse_content(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().startswith("{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value


class GeneratedWorkExperience(WorkExperienceEntry):
    start_date: LenientDate = None
    end_date: LenientDate = None


class GeneratedEducation(EducationEntry):
    start_date: LenientDate = None
    end_date: LenientDate = None


class GeneratedCertification(CertificationEntry):
    issue_date: LenientDate = None
    expiry_date: LenientDate = None


class GeneratedResume(ApiModel):
    """Shape the resume model is instructed to return."""

    title: Optional[str] = None
    professional_title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
    summary: str = ""
    work_experiences: List[GeneratedWorkExperience] = Field(default_factory=list)
    educations: List[GeneratedEducation] = Field(default_factory=list)
    skills: List[SkillItem] = Field(default_factory=list)
    certifications: List[GeneratedCertification] = Field(default_factory=list)

    @field_validator(
        "work_experiences", "educations", "skills", "certifications", mode="before"
    )
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class GenerateResumeRequest(ApiModel):
    application_id: Optional[str] = None
    job_id: Optional[str] = None
    job_info: Optional[JobInfo] = None


class PrintResumeRequest(ApiModel):
    """``resumeContent`` may arrive as a JSON string or an object."""

    resume_content: Union[Dict[str, Any], str]

    @field_validator("resume_content", mode="after")
    @classmethod
    def _decode(cls, value: Union[Dict[str, Any], str]) -> Union[Dict[str, Any], str]:
        if isinstance(value, str):
            try:
                decoded = json.loads(value)
            except json.JSONDecodeError as exc:
                raise ValueError(f"resumeContent is not valid JSON: {exc.msg}") from exc
            if not isinstance(decoded, dict):
                raise ValueError("resumeContent must be a JSON object")
            return decoded
        return value


class SuggestionsRequest(ApiModel):
    job_info: Optional[JobInfo] = None
