# maintenance_app/pdf_generator.py
import logging
import threading

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from maintenance_app import config
from maintenance_app.errors import RenderFailure

logger = logging.getLogger(__name__)

# Caps how many browsers run at once across the process
_render_slots = threading.BoundedSemaphore(max(1, config.MAX_CONCURRENT_RENDERS))


def html_to_pdf(html: str) -> bytes:
    """
    Rasterize an HTML document to an A4 PDF in a freshly launched headless
    Chromium. The browser is closed whether or not rendering succeeds; the
    bytes are only returned once the whole document has been produced.
    """
    with _render_slots:
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch()
                try:
                    page = browser.new_page()
                    page.set_content(html, wait_until="load")
                    pdf = page.pdf(format="A4", print_background=True)
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.exception("PDF rendering failed")
            raise RenderFailure(f"PDF generation failed: {e}")

    if not pdf.startswith(b"%PDF"):
        raise RenderFailure("PDF generation failed: renderer returned an invalid document")
    return pdf


def get_pdf_renderer():
    """Dependency hook so the renderer can be swapped out."""
    return html_to_pdf
