"""FastAPI dependencies: DB session, caller identity and external collaborators.

Tests swap the LLM, PDF renderer and URL fetcher through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from resumate.core.auth import RequestContext, resolve_context
from resumate.core.llm_client import LLMClient, OpenAIChatClient
from resumate.core.pagination import PageParams, parse_page_params
from resumate.db.session import get_db
from resumate.render.pdf import PdfRenderer, PlaywrightPdfRenderer
from resumate.services.job_service import UrlFetcher, fetch_url_text
from resumate.settings import get_settings

_bearer = HTTPBearer(auto_error=False)


def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> RequestContext:
    """Resolve the caller from a Bearer token or the session cookie."""
    token = credentials.credentials if credentials is not None else None
    if not token:
        token = request.cookies.get(get_settings().session_cookie_name)
    return resolve_context(db, token)


def get_page_params(
    next_page_key: str | None = Query(None, alias="nextPageKey"),
    page_size: str | None = Query(None, alias="pageSize"),
) -> PageParams:
    return parse_page_params(next_page_key, page_size)


@lru_cache
def get_llm_client() -> LLMClient:
    return OpenAIChatClient()


def get_pdf_renderer() -> PdfRenderer:
    return PlaywrightPdfRenderer()


def get_url_fetcher() -> UrlFetcher:
    return fetch_url_text


__all__ = [
    "get_db",
    "get_request_context",
    "get_page_params",
    "get_llm_client",
    "get_pdf_renderer",
    "get_url_fetcher",
]
