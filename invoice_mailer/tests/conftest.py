"""
Shared pytest fixtures for invoice_mailer tests.
"""

import pytest
from unittest.mock import MagicMock

from invoice_mailer.core.models import RecordRef, Source
from invoice_mailer.core.retry import RetryPolicy
from invoice_mailer.core.run_log import RunLog
from invoice_mailer.core.window import month_window
from invoice_mailer.processors.downloader import RetryingDownloader
from invoice_mailer.processors.lister import RecordLister
from invoice_mailer.processors.merger import DocumentMerger
from invoice_mailer.processors.pipeline import PipelineOrchestrator
from invoice_mailer.processors.router import Dispatcher
from invoice_mailer.tests.helpers import FakeFetcher, FakeRecordSource


@pytest.fixture
def sink() -> RunLog:
    """Run log that does not echo to structlog."""
    return RunLog(echo=False)


@pytest.fixture
def january_window():
    """January 2025 in UTC."""
    return month_window(2025, 1, "UTC")


@pytest.fixture
def sample_record() -> RecordRef:
    """Sample paid invoice."""
    return RecordRef(
        id="in_001",
        document_url="https://pay.stripe.com/invoice/acct_1/in_001/pdf",
        number="PC-0001",
        status="paid",
        amount_paid=12000,
        amount_due=12000,
    )


@pytest.fixture
def mock_mailer():
    """Mailer whose send() succeeds unless a side_effect is set."""
    return MagicMock()


@pytest.fixture
def build_orchestrator(sink, mock_mailer):
    """Factory wiring real stages around fake remote collaborators."""

    def _build(
        sources: list[Source],
        record_source: FakeRecordSource,
        fetcher: FakeFetcher,
        destinations: dict[str, str],
        mailer_configured: bool = True,
        download_workers: int = 1,
    ) -> PipelineOrchestrator:
        return PipelineOrchestrator(
            sources=sources,
            destinations=destinations,
            lister=RecordLister(record_source, sink, page_size=10),
            downloader=RetryingDownloader(fetcher, sink, RetryPolicy(max_attempts=5)),
            merger=DocumentMerger(sink),
            dispatcher=Dispatcher(mock_mailer, sender="admin@example.com", sink=sink),
            sink=sink,
            mailer_configured=mailer_configured,
            download_workers=download_workers,
        )

    return _build


@pytest.fixture
def mock_settings(monkeypatch):
    """Mock settings for testing."""
    monkeypatch.setenv("STRIPE_KEYS", '{"PC": "sk_test_pc", "ET": "sk_test_et"}')
    monkeypatch.setenv("DESTINATIONS", '{"PC": "pc@example.com", "ET": "et@example.com"}')
    monkeypatch.setenv("ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setenv("GMAIL_APP_PASSWORD", "app-password")
