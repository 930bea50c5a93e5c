from __future__ import annotations

import io
import logging
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from pypdf import PdfReader

from resumate.errors import UpstreamError
from resumate.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class PdfRenderer(Protocol):
    """HTML in, PDF bytes out."""

    def render(self, html: str, *, margin: str) -> bytes: ...


def pdf_page_count(data: bytes) -> int | None:
    """Return the page count of a PDF byte string, if readable.

    Args:
        data: PDF bytes.

    Returns:
        Page count or None if unreadable.
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        return len(reader.pages)
    except Exception as exc:
        logger.warning("Failed to read PDF page count: %s", exc)
        return None


class PlaywrightPdfRenderer:
    """Headless Chromium, launched and torn down for every document."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or get_settings()

    def render(self, html: str, *, margin: str) -> bytes:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=True, args=["--no-sandbox", "--disable-dev-shm-usage"]
                )
                try:
                    page = browser.new_page()
                    page.set_content(html, wait_until="load")
                    data = page.pdf(
                        format=self._settings.pdf_format,
                        print_background=True,
                        margin={"top": margin, "right": margin, "bottom": margin, "left": margin},
                    )
                finally:
                    browser.close()
        except PlaywrightError as exc:
            logger.exception("PDF rendering failed")
            raise UpstreamError(f"Failed to render PDF: {exc}") from exc

        logger.info("Rendered PDF: %d bytes, %s page(s)", len(data), pdf_page_count(data))
        return data
