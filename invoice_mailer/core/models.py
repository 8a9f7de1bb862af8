"""
Data models for the invoice bundling run.

Uses dataclasses for clean, typed data structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class InvalidWindowError(ValueError):
    """Billing window is malformed (start after end, bad year/month)."""


class Category(str, Enum):
    """Invoice bucket. Values double as filename fragments."""

    PRIMARY = "Paid_And_Open"
    OTHER = "Other_Status"


# Invoice statuses that land in Category.PRIMARY
PRIMARY_STATUSES = frozenset({"paid", "open"})


def classify(status: str | None) -> Category:
    """Map an invoice status to its category."""
    if status in PRIMARY_STATUSES:
        return Category.PRIMARY
    return Category.OTHER


@dataclass(frozen=True)
class Source:
    """One Stripe account queried independently."""

    key: str
    credential: str = ""

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval [start, end] in epoch seconds, both ends inclusive."""

    start: int
    end: int
    period: str = ""  # Filename fragment, e.g. "January-2025"
    description: str = ""  # Human text for subjects, e.g. "January 2025"
    year: int | None = None
    month: int | None = None

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidWindowError(
                f"Window start {self.start} is after end {self.end}"
            )


@dataclass(frozen=True)
class RecordRef:
    """One invoice as returned by the record source."""

    id: str
    document_url: str | None = None
    number: str | None = None
    status: str | None = None
    amount_paid: int = 0
    amount_due: int = 0

    @property
    def label(self) -> str:
        """Name used in log lines; invoice number when present."""
        return self.number or self.id

    @classmethod
    def from_stripe(cls, data: dict[str, Any]) -> "RecordRef":
        """Create RecordRef from a Stripe invoice object."""
        return cls(
            id=data["id"],
            document_url=data.get("invoice_pdf"),
            number=data.get("number"),
            status=data.get("status"),
            amount_paid=data.get("amount_paid") or 0,
            amount_due=data.get("amount_due") or 0,
        )


@dataclass
class RecordPage:
    """One page of records from the record source."""

    records: list[RecordRef] = field(default_factory=list)
    has_more: bool = False

    @property
    def last_id(self) -> str | None:
        return self.records[-1].id if self.records else None


@dataclass
class CompositeDocument:
    """Merged PDF for one (source, category) pair."""

    source_key: str
    category: Category
    content: bytes
    period: str

    @property
    def filename(self) -> str:
        return f"{self.source_key.upper()}-{self.category.value}-{self.period}.pdf"


@dataclass
class DestinationGroup:
    """Composite documents bound for one destination address."""

    address: str
    documents: list[CompositeDocument] = field(default_factory=list)
    source_keys: list[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Account keys in the group, e.g. "PC & PCP"."""
        return " & ".join(key.upper() for key in self.source_keys)

    def add(self, document: CompositeDocument) -> None:
        self.documents.append(document)
        if document.source_key not in self.source_keys:
            self.source_keys.append(document.source_key)


@dataclass
class Attachment:
    """Outbound email attachment."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


@dataclass
class OutboundMessage:
    """Email handed to a mailer."""

    sender: str
    to: str
    subject: str
    body: str
    attachments: list[Attachment] = field(default_factory=list)


@dataclass
class RunResult:
    """Outcome of one run, returned to the trigger."""

    success: bool
    logs: list[str] = field(default_factory=list)
    month: int | None = None
    year: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON responses, dropping unset fields."""
        data: dict[str, Any] = {"success": self.success, "logs": self.logs}
        if self.month is not None:
            data["month"] = self.month
        if self.year is not None:
            data["year"] = self.year
        if self.message is not None:
            data["message"] = self.message
        return data
