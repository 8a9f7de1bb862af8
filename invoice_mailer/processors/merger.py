"""
In-memory PDF merging with PyMuPDF.
"""

import fitz  # PyMuPDF

from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.run_log import LogSink

log = get_logger(__name__)

PLACEHOLDER_TEXT = "No data available for this category."


class DocumentMerger:
    """Combines PDF buffers into one composite document."""

    def __init__(self, sink: LogSink):
        self.sink = sink

    def merge(self, buffers: list[bytes | None]) -> bytes | None:
        """
        Append every page of every buffer, in order, to a new PDF.

        None entries are skipped. Any parse or copy error aborts the whole
        merge; there is no partial result.

        Returns:
            Merged PDF bytes, or None on failure or when no pages were copied.
        """
        try:
            with fitz.open() as composite:
                for buffer in buffers:
                    if buffer is None:
                        continue
                    with fitz.open(stream=buffer, filetype="pdf") as source:
                        composite.insert_pdf(source)

                if composite.page_count == 0:
                    log.warning("merge_no_pages", buffers=len(buffers))
                    return None

                merged = composite.tobytes(garbage=3, deflate=True)
                log.info("merge_complete", pages=composite.page_count, size=len(merged))
                return merged
        except Exception as e:
            self.sink.append(f"Error merging PDF buffers: {e}")
            log.error("merge_error", error=str(e))
            return None

    def empty_placeholder(self) -> bytes:
        """Single-page PDF stating that the category has no data."""
        with fitz.open() as doc:
            page = doc.new_page()
            page.insert_text((72, 72), PLACEHOLDER_TEXT, fontsize=12)
            return doc.tobytes(garbage=3, deflate=True)
