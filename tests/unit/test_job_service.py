import pytest
import requests

from resumate.errors import UpstreamError
from resumate.services import job_service
from resumate.services.job_service import fetch_url_text, normalize_job_fields


class FakeResponse:
    def __init__(self, text: str, status: int = 200):
        self.text = text
        self.status = status

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} Client Error")


def test_fetch_prefers_main_content(monkeypatch) -> None:
    html = (
        "<html><body><nav>Menu</nav><main><h1>Engineer</h1><script>x()</script>"
        "<p>Python required</p></main></body></html>"
    )
    monkeypatch.setattr(job_service.requests, "get", lambda *a, **k: FakeResponse(html))
    assert fetch_url_text("https://jobs.example.com/1") == "Engineer\nPython required"


def test_fetch_failure_is_400(monkeypatch) -> None:
    monkeypatch.setattr(job_service.requests, "get", lambda *a, **k: FakeResponse("", status=404))
    with pytest.raises(UpstreamError) as excinfo:
        fetch_url_text("https://jobs.example.com/gone")
    assert excinfo.value.status_code == 400


def test_fetch_connection_error_is_400(monkeypatch) -> None:
    def boom(*_args, **_kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(job_service.requests, "get", boom)
    with pytest.raises(UpstreamError, match="refused") as excinfo:
        fetch_url_text("https://jobs.example.com/down")
    assert excinfo.value.status_code == 400


def test_normalize_fills_defaults() -> None:
    fields = normalize_job_fields({"title": " Engineer ", "duties": "- Code\n- Review\n"})
    assert fields["position"] == "Engineer"
    assert fields["duties"] == ["Code", "Review"]
    assert fields["requirements"] == []
    assert fields["companyName"] is None
    assert fields["salaryMax"] is None
    assert fields["url"] is None


def test_normalize_keeps_valid_dates_only() -> None:
    fields = normalize_job_fields(
        {"postingDate": "2024-05-01", "applicationDeadline": "next Friday", "salaryMax": 120000},
        url="https://x/1",
    )
    assert fields["postingDate"] == "2024-05-01"
    assert fields["applicationDeadline"] is None
    assert fields["salaryMax"] == 120000.0
    assert fields["url"] == "https://x/1"
