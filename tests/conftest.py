from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterator, List

# Must be set before resumate.settings / resumate.db.session are imported.
os.environ.setdefault("RESUMATE_SQL_DB_URL", "sqlite://")
os.environ.setdefault("RESUMATE_SESSION_SECRET", "test-secret")
os.environ.setdefault("RESUMATE_OPENAI_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from resumate.api import deps
from resumate.api.server import app
from resumate.core.auth import RequestContext, issue_session_token
from resumate.db.models import User
from resumate.db.session import init_db, make_engine

PDF_BYTES = b"%PDF-1.4\n% stub\n"


class StubLLM:
    """Canned LLMClient: pops one queued response per call."""

    def __init__(self, responses: List[Any] | None = None):
        self.responses: List[Any] = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def complete(self, *, system_prompt, user_prompt, model, json_mode=False, temperature=None) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "model": model,
                "json_mode": json_mode,
                "temperature": temperature,
            }
        )
        if not self.responses:
            raise AssertionError("unexpected LLM call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, str) else json.dumps(response)


class StubRenderer:
    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def render(self, html: str, *, margin: str) -> bytes:
        self.calls.append({"html": html, "margin": margin})
        return PDF_BYTES


class StubFetcher:
    def __init__(self, text: str = "Senior Engineer at Acme"):
        self.text = text
        self.urls: List[str] = []

    def __call__(self, url: str) -> str:
        self.urls.append(url)
        return self.text


@pytest.fixture()
def engine():
    eng = make_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def llm() -> StubLLM:
    return StubLLM()


@pytest.fixture()
def renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture()
def fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture()
def client(session_factory, llm, renderer, fetcher) -> Iterator[TestClient]:
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = _get_db
    app.dependency_overrides[deps.get_llm_client] = lambda: llm
    app.dependency_overrides[deps.get_pdf_renderer] = lambda: renderer
    app.dependency_overrides[deps.get_url_fetcher] = lambda: fetcher
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def auth_headers(user_id: str = "user-a", email: str | None = None) -> Dict[str, str]:
    token = issue_session_token(user_id, email or f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def alice() -> Dict[str, str]:
    return auth_headers("user-a", "alice@example.com")


@pytest.fixture()
def bob() -> Dict[str, str]:
    return auth_headers("user-b", "bob@example.com")


@pytest.fixture()
def ctx(db) -> RequestContext:
    db.add(User(id="user-a", email="alice@example.com"))
    db.commit()
    return RequestContext(user_id="user-a", email="alice@example.com")


PROFILE_BODY = {
    "legalFirstName": "Alice",
    "legalLastName": "Smith",
    "title": "Backend Engineer",
    "bio": "Builds APIs.",
    "phone": "555-0100",
    "location": "Berlin, DE",
    "website": "https://alice.dev",
    "linkedin": "",
    "github": "https://github.com/alice",
    "skills": "Python, SQL, FastAPI",
}


@pytest.fixture()
def with_profile(client, alice) -> Dict[str, Any]:
    resp = client.post("/api/profile", json=PROFILE_BODY, headers=alice)
    assert resp.status_code == 200, resp.text
    return resp.json()
