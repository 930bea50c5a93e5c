import io

import pytest
from pypdf import PdfReader

from resumate.errors import UpstreamError
from resumate.render.pdf import PlaywrightPdfRenderer, pdf_page_count
from resumate.render.template import render_resume_html
from resumate.schemas.resume import GeneratedResume


@pytest.mark.integration
def test_resume_renders_to_a4() -> None:
    """Test a real Chromium render produces one A4 page."""
    resume = GeneratedResume.model_validate(
        {"firstName": "Alice", "lastName": "Smith", "summary": "Builds APIs.", "skills": ["Python"]}
    )
    try:
        data = PlaywrightPdfRenderer().render(render_resume_html(resume), margin="1cm")
    except UpstreamError as exc:
        pytest.skip(f"Chromium unavailable: {exc}")

    assert data.startswith(b"%PDF")
    assert pdf_page_count(data) == 1
    box = PdfReader(io.BytesIO(data)).pages[0].mediabox
    assert abs(float(box.width) - 595) < 2
    assert abs(float(box.height) - 842) < 2


def test_page_count_of_garbage_is_none() -> None:
    assert pdf_page_count(b"not a pdf") is None
