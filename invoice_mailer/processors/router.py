"""
Bundle routing and dispatch.

Composite documents are grouped by destination address; each group goes
out as one email with all of its PDFs attached.
"""

from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.models import (
    Attachment,
    CompositeDocument,
    DestinationGroup,
    OutboundMessage,
    TimeWindow,
)
from invoice_mailer.core.run_log import LogSink
from invoice_mailer.services.mailer import Mailer

log = get_logger(__name__)


class BundleRouter:
    """Maps account keys to destination groups."""

    def __init__(self, destinations: dict[str, str]):
        self.destinations = {key.upper(): address for key, address in destinations.items()}
        self._groups: dict[str, DestinationGroup] = {}

    def destination_for(self, source_key: str) -> str | None:
        return self.destinations.get(source_key.upper())

    def add(self, document: CompositeDocument) -> DestinationGroup:
        """
        Route a document to its group.

        Raises:
            KeyError: the document's account has no destination
        """
        address = self.destination_for(document.source_key)
        if address is None:
            raise KeyError(f"No destination configured for {document.source_key}")

        group = self._groups.get(address)
        if group is None:
            group = DestinationGroup(address=address)
            self._groups[address] = group
        group.add(document)
        return group

    def groups(self) -> list[DestinationGroup]:
        """Non-empty groups in first-routed order."""
        return [group for group in self._groups.values() if group.documents]


class Dispatcher:
    """Sends destination groups through a mailer."""

    def __init__(self, mailer: Mailer, sender: str, sink: LogSink):
        self.mailer = mailer
        self.sender = sender
        self.sink = sink

    def build_message(self, group: DestinationGroup, window: TimeWindow) -> OutboundMessage:
        return OutboundMessage(
            sender=self.sender,
            to=group.address,
            subject=f"PDF Invoices for {window.description} ({group.label})",
            body=(
                f"Attached are the combined PDF invoices ({group.label}) "
                f"for {window.description}."
            ),
            attachments=[
                Attachment(filename=document.filename, content=document.content)
                for document in group.documents
            ],
        )

    def dispatch(self, group: DestinationGroup, window: TimeWindow) -> bool:
        """
        Send one group. Failures are logged, never raised.

        Returns:
            True if the mailer accepted the message.
        """
        try:
            self.mailer.send(self.build_message(group, window))
        except Exception as e:
            self.sink.append(f"Error sending {group.label} email: {e}")
            log.error("dispatch_error", to=group.address, group=group.label, error=str(e))
            return False

        self.sink.append(f"{group.label} email sent successfully.")
        log.info("dispatch_complete", to=group.address, group=group.label, attachments=len(group.documents))
        return True

    def dispatch_all(self, groups: list[DestinationGroup], window: TimeWindow) -> dict[str, bool]:
        """Attempt every group regardless of earlier failures."""
        return {group.address: self.dispatch(group, window) for group in groups}
