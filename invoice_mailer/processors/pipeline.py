"""
Invoice bundling pipeline.

For each account and category:
1. List invoices in the window
2. Download every invoice PDF (rate limited, retried)
3. Merge into one composite, or fall back to a placeholder page
4. Route the composite to its destination group
Then send one email per destination group.
"""

from concurrent.futures import ThreadPoolExecutor

from invoice_mailer.config import Settings
from invoice_mailer.core.logging import bind_context, clear_context, get_logger
from invoice_mailer.core.models import (
    Category,
    CompositeDocument,
    InvalidWindowError,
    RecordRef,
    RunResult,
    Source,
    TimeWindow,
)
from invoice_mailer.core.retry import RetryPolicy
from invoice_mailer.core.run_log import RunLog
from invoice_mailer.processors.downloader import RetryingDownloader
from invoice_mailer.processors.lister import RecordLister
from invoice_mailer.processors.merger import DocumentMerger
from invoice_mailer.processors.router import BundleRouter, Dispatcher
from invoice_mailer.services.fetcher import RateLimitedFetcher, RateLimiter
from invoice_mailer.services.mailer import SmtpMailer
from invoice_mailer.services.stripe import StripeInvoiceSource

log = get_logger(__name__)


class PipelineOrchestrator:
    """Runs one invoice job over every configured account."""

    def __init__(
        self,
        sources: list[Source],
        destinations: dict[str, str],
        lister: RecordLister,
        downloader: RetryingDownloader,
        merger: DocumentMerger,
        dispatcher: Dispatcher,
        sink: RunLog,
        mailer_configured: bool = True,
        download_workers: int = 1,
    ):
        self.sources = sources
        self.destinations = destinations
        self.lister = lister
        self.downloader = downloader
        self.merger = merger
        self.dispatcher = dispatcher
        self.sink = sink
        self.mailer_configured = mailer_configured
        self.download_workers = download_workers
        self._fetcher: RateLimitedFetcher | None = None

    @classmethod
    def from_settings(cls, config: Settings, sink: RunLog | None = None) -> "PipelineOrchestrator":
        """Wire the Stripe, HTTP and SMTP adapters from settings."""
        sink = sink or RunLog()
        fetcher = RateLimitedFetcher(
            limiter=RateLimiter(config.max_requests_per_second),
            timeout=config.download_timeout_seconds,
        )
        orchestrator = cls(
            sources=config.sources(),
            destinations=config.destinations,
            lister=RecordLister(
                StripeInvoiceSource(config.stripe_api_base, config.stripe_timeout_seconds),
                sink,
                page_size=config.stripe_page_size,
            ),
            downloader=RetryingDownloader(
                fetcher,
                sink,
                RetryPolicy(max_attempts=config.download_max_attempts),
            ),
            merger=DocumentMerger(sink),
            dispatcher=Dispatcher(
                SmtpMailer(
                    user=config.admin_email,
                    password=config.gmail_app_password,
                    host=config.smtp_host,
                    port=config.smtp_port,
                ),
                sender=config.admin_email,
                sink=sink,
            ),
            sink=sink,
            mailer_configured=config.mailer_configured,
            download_workers=config.download_workers,
        )
        orchestrator._fetcher = fetcher
        return orchestrator

    def close(self) -> None:
        if self._fetcher is not None:
            self._fetcher.close()

    def run(self, window: TimeWindow) -> RunResult:
        """
        Process every account and category, then dispatch.

        Raises:
            InvalidWindowError: window start is after its end
        """
        if window.start > window.end:
            raise InvalidWindowError(f"Window start {window.start} is after end {window.end}")

        bind_context(period=window.period)
        try:
            return self._run(window)
        finally:
            clear_context()

    def _run(self, window: TimeWindow) -> RunResult:
        self.sink.append("===== Starting PDF invoice job =====")
        self.sink.append(f"Range: {window.description} ({window.start} to {window.end})")

        if not self.mailer_configured:
            self.sink.append("Missing email credentials. Not sending anything.")
            log.error("mailer_not_configured")
            return self._result(False, window, message="Missing email credentials")

        router = BundleRouter(self.destinations)

        for source in self.sources:
            if not source.has_credential:
                self.sink.append(f"Missing credential for {source.key}, skipping")
                continue
            if router.destination_for(source.key) is None:
                self.sink.append(f"No destination configured for {source.key}, skipping")
                continue

            primary, other = self.lister.list(source, window)
            log.info("source_listed", source=source.key, primary=len(primary), other=len(other))

            for category, records in ((Category.PRIMARY, primary), (Category.OTHER, other)):
                try:
                    document = self.build_composite(source, category, records, window)
                    router.add(document)
                except Exception as e:
                    self.sink.append(
                        f"Could not create final PDF for {source.key}-{category.value}, skipping: {e}"
                    )
                    log.error(
                        "composite_error",
                        source=source.key,
                        category=category.value,
                        error=str(e),
                    )

        groups = router.groups()
        if not groups:
            self.sink.append("No attachments to send.")
        outcomes = self.dispatcher.dispatch_all(groups, window)

        self.sink.append("===== Invoice job completed. =====")
        log.info(
            "invoice_job_complete",
            groups=len(groups),
            sent=sum(1 for ok in outcomes.values() if ok),
            failed=sum(1 for ok in outcomes.values() if not ok),
        )
        return self._result(True, window)

    def build_composite(
        self,
        source: Source,
        category: Category,
        records: list[RecordRef],
        window: TimeWindow,
    ) -> CompositeDocument:
        """Download, merge and name the document for one (source, category) pair."""
        name = f"{source.key}-{category.value}"

        if records:
            buffers = self.download_all(records)
            if buffers:
                content = self.merger.merge(buffers)
                if content is None:
                    self.sink.append(f"Merge failed for {name}, creating empty PDF")
                    content = self.merger.empty_placeholder()
            else:
                self.sink.append(f"No valid PDFs for {name}, creating empty PDF")
                content = self.merger.empty_placeholder()
        else:
            content = self.merger.empty_placeholder()

        return CompositeDocument(
            source_key=source.key,
            category=category,
            content=content,
            period=window.period,
        )

    def download_all(self, records: list[RecordRef]) -> list[bytes]:
        """Download every record's PDF, keeping listing order and dropping failures."""
        def fetch(record: RecordRef) -> bytes | None:
            return self.downloader.download(record.document_url, record.label)

        if self.download_workers > 1 and len(records) > 1:
            with ThreadPoolExecutor(max_workers=self.download_workers) as pool:
                buffers = list(pool.map(fetch, records))
        else:
            buffers = [fetch(record) for record in records]

        return [buffer for buffer in buffers if buffer is not None]

    def _result(self, success: bool, window: TimeWindow, message: str | None = None) -> RunResult:
        return RunResult(
            success=success,
            logs=self.sink.lines(),
            month=window.month,
            year=window.year,
            message=message,
        )


def run_invoice_job(window: TimeWindow, config: Settings | None = None) -> RunResult:
    """Build a pipeline from settings, run it once, and release its HTTP client."""
    if config is None:
        from invoice_mailer.config import settings as config

    orchestrator = PipelineOrchestrator.from_settings(config)
    try:
        return orchestrator.run(window)
    finally:
        orchestrator.close()
