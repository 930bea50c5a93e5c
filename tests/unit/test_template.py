from datetime import datetime

from resumate.render.template import (
    clean_letter_html,
    month_year,
    render_cover_letter_html,
    render_resume_html,
)
from resumate.schemas.resume import GeneratedResume


def _resume(**overrides) -> GeneratedResume:
    data = {
        "firstName": "Alice",
        "lastName": "Smith",
        "professionalTitle": "Backend Engineer",
        "email": "alice@example.com",
        "phone": "555-0100",
        "summary": "Builds APIs.",
        "workExperiences": [
            {
                "company": "Acme",
                "position": "Engineer",
                "startDate": "2021-03-01",
                "isCurrent": True,
                "descriptions": ["Shipped <v1>"],
            }
        ],
        "educations": [
            {
                "institution": "TU Berlin",
                "degree": "MSc",
                "field": "CS",
                "startDate": "2015-10-01",
                "endDate": "2017-09-30",
            }
        ],
        "certifications": [
            {"name": "CKA", "issuer": "CNCF", "issueDate": "2019-01-01", "expiryDate": "2020-01-01"}
        ],
        "skills": ["Python", "SQL"],
    }
    data.update(overrides)
    return GeneratedResume.model_validate(data)


def test_month_year() -> None:
    assert month_year(datetime(2021, 3, 14)) == "Mar 2021"
    assert month_year(None) == ""
    assert month_year(None, "Present") == "Present"


def test_render_is_deterministic() -> None:
    assert render_resume_html(_resume()) == render_resume_html(_resume())


def test_render_sections_and_dates() -> None:
    html = render_resume_html(_resume())
    assert "@page { size: A4; margin: 1cm; }" in html
    assert "Alice Smith" in html
    assert "alice@example.com | 555-0100" in html
    assert "Mar 2021 - Present" in html
    assert "Oct 2015 - Sep 2017" in html
    assert "MSc in CS" in html
    assert "Python, SQL" in html
    assert "Shipped &lt;v1&gt;" in html


def test_expired_certification_still_shows_expiry() -> None:
    html = render_resume_html(
        _resume(
            certifications=[
                {"name": "CKA", "issuer": "CNCF", "issueDate": "2019-01-01", "expiryDate": "2020-01-01"},
                {"name": "OSCP", "issuer": "OffSec", "issueDate": "2022-06-01"},
            ]
        )
    )
    assert "Jan 2019 - Jan 2020" in html
    assert "Jun 2022</div>" in html
    assert "Jun 2022 - " not in html


def test_empty_sections_are_omitted() -> None:
    html = render_resume_html(
        _resume(workExperiences=[], educations=[], certifications=[], skills=[], summary="")
    )
    for title in ("Work Experience", "Education", "Certifications", "Skills"):
        assert title not in html
    assert 'class="summary"' not in html


def test_clean_letter_html_plain_text() -> None:
    assert clean_letter_html("Dear team,\n\nThanks & regards") == (
        "<p>Dear team,</p>\n<p>Thanks &amp; regards</p>"
    )


def test_cover_letter_wraps_body() -> None:
    html = render_cover_letter_html("<html><body><p>Hi</p><style>p{}</style></body></html>")
    assert "<p>Hi</p>" in html
    assert "p{}" not in html
    assert "@page" in html
