from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy import and_, or_
from sqlalchemy.orm import Query

from resumate.errors import ValidationFailedError
from resumate.settings import get_settings

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class PageParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    next_page_key: Optional[str] = Field(default=None, alias="nextPageKey")
    page_size: int = Field(default=10, alias="pageSize", gt=0, le=MAX_PAGE_SIZE)


@dataclass
class Page(Generic[T]):
    items: List[T]
    total_count: int
    page_size: int
    next_page_key: Optional[str] = None


def parse_page_params(next_page_key: str | None, page_size: str | None) -> PageParams:
    """Validate raw query-string pagination values.

    Args:
        next_page_key: Opaque cursor from a previous page.
        page_size: Requested page size (string from the query string).

    Returns:
        Validated PageParams.
    """
    settings = get_settings()
    raw: Dict[str, Any] = {"nextPageKey": next_page_key or None}
    if page_size is None or page_size == "":
        raw["pageSize"] = settings.default_page_size
    else:
        raw["pageSize"] = page_size
    try:
        params = PageParams.model_validate(raw)
    except ValidationError as exc:
        raise ValidationFailedError.from_errors(exc.errors(), "Invalid pagination parameters") from exc
    if params.page_size > settings.max_page_size:
        raise ValidationFailedError(
            "Invalid pagination parameters",
            errors=[{"field": "pageSize", "message": f"must be <= {settings.max_page_size}"}],
        )
    return params


def paginate(query: Query, order_column, id_column, params: PageParams) -> Page:
    """Keyset pagination over ``query`` ordered by (order_column, id) descending.

    The cursor is the id of the first row of the page it points to; it must
    belong to ``query`` (which already carries the ownership filter). One extra
    row is fetched to decide whether another page exists.
    """
    total_count = query.order_by(None).count()

    scoped = query
    if params.next_page_key:
        anchor = (
            query.filter(id_column == params.next_page_key)
            .with_entities(order_column)
            .first()
        )
        if anchor is None:
            raise ValidationFailedError(
                "Invalid pagination parameters",
                errors=[{"field": "nextPageKey", "message": "unknown cursor"}],
            )
        key = anchor[0]
        scoped = scoped.filter(
            or_(
                order_column < key,
                and_(order_column == key, id_column <= params.next_page_key),
            )
        )

    rows = (
        scoped.order_by(order_column.desc(), id_column.desc())
        .limit(params.page_size + 1)
        .all()
    )
    next_page_key = None
    if len(rows) > params.page_size:
        next_page_key = str(rows[params.page_size].id)
        rows = rows[: params.page_size]
    return Page(
        items=rows,
        total_count=total_count,
        page_size=params.page_size,
        next_page_key=next_page_key,
    )
