from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from resumate.db.utils import to_naive_utc


class ApiModel(BaseModel):
    """Base for request bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return value


DateValue = Annotated[datetime, AfterValidator(to_naive_utc)]
OptionalDate = Annotated[
    Optional[datetime], BeforeValidator(_blank_to_none), AfterValidator(to_naive_utc)
]
UrlOrEmpty = Annotated[str, AfterValidator(_check_url)]
OptionalUrl = Annotated[Optional[str], BeforeValidator(_blank_to_none), AfterValidator(_check_url)]


def iso(value: datetime | None) -> str | None:
    """Serialize a stored (naive UTC) datetime as ISO-8601 with a Z suffix."""
    if value is None:
        return None
    return value.replace(microsecond=0).isoformat() + "Z"
