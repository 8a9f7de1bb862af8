"""
Invoice lister: pages through a record source and splits records by category.
"""

from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.models import Category, RecordRef, Source, TimeWindow, classify
from invoice_mailer.core.run_log import LogSink
from invoice_mailer.services.stripe import RecordSource

log = get_logger(__name__)


class RecordLister:
    """Lists all invoices for one account inside a window."""

    def __init__(self, record_source: RecordSource, sink: LogSink, page_size: int = 10):
        self.record_source = record_source
        self.sink = sink
        self.page_size = page_size

    def list(self, source: Source, window: TimeWindow) -> tuple[list[RecordRef], list[RecordRef]]:
        """
        Fetch and classify every invoice created in the window.

        Listing errors are logged and turn into "no records" for this
        account; they never propagate.

        Returns:
            (primary, other) lists, each in the order received.
        """
        primary: list[RecordRef] = []
        other: list[RecordRef] = []

        try:
            cursor: str | None = None
            pages = 0
            while True:
                page = self.record_source.list_page(
                    source.credential, self.page_size, cursor, window
                )
                pages += 1
                if not page.records:
                    break

                for record in page.records:
                    if classify(record.status) is Category.PRIMARY:
                        primary.append(record)
                    else:
                        other.append(record)
                    self.sink.append(f"Invoice ID: {record.id} (num: {record.number})")

                if not page.has_more:
                    break
                cursor = page.last_id
        except Exception as e:
            self.sink.append(f"Error fetching invoices for {source.key}: {e}")
            log.error("invoice_listing_error", source=source.key, error=str(e))
            return [], []

        log.info(
            "invoice_listing_complete",
            source=source.key,
            pages=pages,
            primary=len(primary),
            other=len(other),
        )
        return primary, other
