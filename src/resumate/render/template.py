"""HTML documents handed to the PDF renderer.

Rendering is a pure function of its input: no clock, no randomness, so the
same resume always produces byte-identical HTML.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, List

import jinja2
from bs4 import BeautifulSoup
from markupsafe import Markup, escape

from resumate.schemas.resume import GeneratedResume

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_year(value: datetime | None, default: str = "") -> str:
    """Format a date as ``Mon yyyy`` independent of the process locale."""
    if value is None:
        return default
    return f"{_MONTHS[value.month - 1]} {value.year}"


@lru_cache
def _env() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("resumate", "templates"),
        autoescape=jinja2.select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    env.filters["month_year"] = month_year
    return env


def _resume_context(resume: GeneratedResume) -> Dict[str, Any]:
    full_name = " ".join(p for p in (resume.first_name, resume.last_name) if p)
    contact: List[str] = [
        value
        for value in (
            resume.email,
            resume.phone,
            resume.location,
            resume.website,
            resume.linkedin,
            resume.github,
        )
        if value
    ]
    return {
        "full_name": full_name,
        "professional_title": resume.professional_title,
        "contact": contact,
        "summary": resume.summary,
        "work_experiences": resume.work_experiences,
        "educations": resume.educations,
        "certifications": resume.certifications,
        "skills": resume.skills,
    }


def render_resume_html(resume: GeneratedResume) -> str:
    """Render structured resume content; empty sections are left out entirely."""
    return _env().get_template("resume.html").render(resume=_resume_context(resume))


def clean_letter_html(raw: str) -> str:
    """Reduce model output to the letter body: no document wrapper, no scripts."""
    soup = BeautifulSoup(raw or "", "html.parser")
    if soup.find() is None:
        paragraphs = [p.strip() for p in (raw or "").split("\n\n") if p.strip()]
        return "\n".join(f"<p>{escape(p)}</p>" for p in paragraphs)
    for tag in soup(["script", "style", "head", "title", "meta", "link"]):
        tag.decompose()
    body = soup.find("body")
    root = body if body is not None else soup
    if root.find("html") is not None:
        root = root.find("html")
    return "".join(str(child) for child in root.children).strip()


def render_cover_letter_html(body_html: str) -> str:
    return _env().get_template("cover_letter.html").render(body=Markup(clean_letter_html(body_html)))
