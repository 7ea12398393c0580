# tests/test_pdf_generator.py
from contextlib import contextmanager

import pytest
from playwright.sync_api import Error as PlaywrightError

from maintenance_app import pdf_generator
from maintenance_app.errors import RenderFailure

from conftest import FAKE_PDF


class FakePage:

    def __init__(self, browser):
        self.browser = browser

    def set_content(self, html, wait_until=None):
        if self.browser.fail_on_content:
            raise PlaywrightError("Target page, context or browser has been closed")
        self.browser.content = html
        self.browser.wait_until = wait_until

    def pdf(self, **options):
        self.browser.pdf_options = options
        return self.browser.output


class FakeBrowser:

    def __init__(self, output=FAKE_PDF, fail_on_content=False):
        self.output = output
        self.fail_on_content = fail_on_content
        self.closed = False
        self.content = None
        self.wait_until = None
        self.pdf_options = None

    def new_page(self):
        return FakePage(self)

    def close(self):
        self.closed = True


class FakeChromium:

    def __init__(self, browser):
        self.browser = browser

    def launch(self):
        return self.browser


class FakePlaywright:

    def __init__(self, browser):
        self.chromium = FakeChromium(browser)


@pytest.fixture
def use_browser(monkeypatch):
    def _use(browser):
        @contextmanager
        def fake_sync_playwright():
            yield FakePlaywright(browser)

        monkeypatch.setattr(pdf_generator, "sync_playwright", fake_sync_playwright)
        return browser
    return _use


def test_renders_a4_pdf_and_closes_browser(use_browser):
    browser = use_browser(FakeBrowser())

    pdf = pdf_generator.html_to_pdf("<h1>Equipment Status Report</h1>")

    assert pdf == FAKE_PDF
    assert browser.content == "<h1>Equipment Status Report</h1>"
    assert browser.wait_until == "load"
    assert browser.pdf_options["format"] == "A4"
    assert browser.pdf_options["print_background"] is True
    assert browser.closed


def test_browser_error_becomes_render_failure(use_browser):
    browser = use_browser(FakeBrowser(fail_on_content=True))

    with pytest.raises(RenderFailure) as excinfo:
        pdf_generator.html_to_pdf("<p>broken</p>")

    assert excinfo.value.message.startswith("PDF generation failed:")
    assert browser.closed


def test_output_without_pdf_header_is_rejected(use_browser):
    browser = use_browser(FakeBrowser(output=b"<html>not a pdf</html>"))

    with pytest.raises(RenderFailure) as excinfo:
        pdf_generator.html_to_pdf("<p>x</p>")

    assert "invalid document" in excinfo.value.message
    assert browser.closed


def test_render_slot_is_released_after_failure(use_browser):
    use_browser(FakeBrowser(fail_on_content=True))
    for _ in range(5):
        with pytest.raises(RenderFailure):
            pdf_generator.html_to_pdf("<p>x</p>")

    use_browser(FakeBrowser())
    assert pdf_generator.html_to_pdf("<p>y</p>") == FAKE_PDF


def test_default_renderer_is_html_to_pdf():
    assert pdf_generator.get_pdf_renderer() is pdf_generator.html_to_pdf
