"""
Invoice PDF downloader with bounded retry.
"""

from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.retry import RetryPolicy
from invoice_mailer.core.run_log import LogSink
from invoice_mailer.services.fetcher import Fetcher

log = get_logger(__name__)


class RetryingDownloader:
    """Downloads one document, returning None when it cannot be fetched."""

    def __init__(self, fetcher: Fetcher, sink: LogSink, policy: RetryPolicy | None = None):
        self.fetcher = fetcher
        self.sink = sink
        self.policy = policy or RetryPolicy(max_attempts=5)

    def download(self, reference: str | None, label: str) -> bytes | None:
        """
        Fetch a PDF into memory.

        Args:
            reference: Document URL; None or empty means the invoice has no PDF
            label: Invoice number used in log lines

        Returns:
            PDF bytes, or None when the URL is missing or every attempt failed.
        """
        if not reference:
            self.sink.append(f"No PDF URL for invoice {label}")
            return None

        def attempt_fetch(attempt: int) -> bytes:
            content = self.fetcher.fetch(reference)
            self.sink.append(f"File downloaded in memory for invoice: {label}")
            log.debug("invoice_downloaded", invoice=label, attempt=attempt, size=len(content))
            return content

        def on_error(attempt: int, error: Exception) -> None:
            self.sink.append(f"Error downloading {label} (attempt {attempt}): {error}")
            log.warning("invoice_download_error", invoice=label, attempt=attempt, error=str(error))

        def on_exhausted() -> None:
            self.sink.append(f"Skipping invoice {label} after max attempts")
            log.error("invoice_download_exhausted", invoice=label, attempts=self.policy.max_attempts)

        return self.policy.call(
            attempt_fetch,
            fallback=None,
            on_error=on_error,
            on_exhausted=on_exhausted,
        )
