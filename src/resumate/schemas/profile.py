from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from resumate.schemas.common import ApiModel, UrlOrEmpty


class ProfileIn(ApiModel):
    legal_first_name: str = Field(min_length=1)
    legal_last_name: str = Field(min_length=1)
    has_preferred_name: bool = False
    preferred_first_name: Optional[str] = None
    preferred_last_name: Optional[str] = None
    title: str = ""
    bio: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    location: str = ""
    phone: str = ""
    website: UrlOrEmpty = ""
    linkedin: UrlOrEmpty = ""
    github: UrlOrEmpty = ""
    skills: List[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            seen: List[str] = []
            for item in value:
                name = str(item).strip() if item is not None else ""
                if name and name not in seen:
                    seen.append(name)
            return seen
        return value

    @model_validator(mode="after")
    def _default_preferred_names(self) -> "ProfileIn":
        if not self.has_preferred_name:
            self.preferred_first_name = self.legal_first_name
            self.preferred_last_name = self.legal_last_name
        return self
