"""
Test doubles and PDF helpers.
"""

import fitz

from invoice_mailer.core.models import RecordPage


def make_pdf(*texts: str) -> bytes:
    """Build an in-memory PDF with one page per text."""
    with fitz.open() as doc:
        for text in texts:
            page = doc.new_page()
            page.insert_text((72, 72), text)
        return doc.tobytes()


def page_texts(pdf: bytes) -> list[str]:
    """Text of each page, stripped."""
    with fitz.open(stream=pdf, filetype="pdf") as doc:
        return [page.get_text().strip() for page in doc]


class FakeRecordSource:
    """Serves pre-built pages per credential; records every call."""

    def __init__(self, pages: dict[str, list[RecordPage]] | None = None, error: Exception | None = None):
        self.pages = pages or {}
        self.error = error
        self.calls: list[tuple[str, int, str | None]] = []

    def list_page(self, credential, page_size, cursor, window):
        self.calls.append((credential, page_size, cursor))
        if self.error:
            raise self.error
        pages = self.pages.get(credential, [])
        index = sum(1 for call in self.calls if call[0] == credential) - 1
        if index >= len(pages):
            return RecordPage(records=[], has_more=False)
        return pages[index]


class FakeFetcher:
    """Maps URL to bytes, or to an exception raised on every attempt.

    Unknown URLs raise ConnectionError.
    """

    def __init__(self, responses: dict[str, bytes | Exception] | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        response = self.responses.get(url)
        if response is None:
            raise ConnectionError(f"no route to {url}")
        if isinstance(response, Exception):
            raise response
        return response
