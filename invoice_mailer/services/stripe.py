"""
Stripe REST client for listing invoices.
"""

from typing import Protocol

import httpx

from invoice_mailer.config import settings
from invoice_mailer.core.logging import get_logger
from invoice_mailer.core.models import RecordPage, RecordRef, TimeWindow

log = get_logger(__name__)


class RecordSource(Protocol):
    """Paginated record listing capability."""

    def list_page(
        self,
        credential: str,
        page_size: int,
        cursor: str | None,
        window: TimeWindow,
    ) -> RecordPage: ...


class StripeInvoiceSource:
    """Lists invoices through the Stripe REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.stripe_api_base).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.stripe_timeout_seconds
        self._transport = transport

    def list_page(
        self,
        credential: str,
        page_size: int,
        cursor: str | None,
        window: TimeWindow,
    ) -> RecordPage:
        """
        Fetch one page of invoices created inside the window.

        Args:
            credential: Stripe secret key for the account
            page_size: Stripe "limit" parameter
            cursor: Invoice id to continue after, or None for the first page
            window: Filter on invoice creation time (inclusive)

        Returns:
            RecordPage with records in Stripe's order.

        Raises:
            httpx.HTTPError: transport failure or non-2xx response
        """
        params: dict[str, str | int] = {
            "limit": page_size,
            "created[gte]": window.start,
            "created[lte]": window.end,
        }
        if cursor:
            params["starting_after"] = cursor

        with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
            response = client.get(
                f"{self.base_url}/v1/invoices",
                params=params,
                headers={"Authorization": f"Bearer {credential}"},
            )
            response.raise_for_status()
            payload = response.json()

        records = [RecordRef.from_stripe(item) for item in payload.get("data") or []]
        log.debug("stripe_page_fetched", count=len(records), cursor=cursor)
        return RecordPage(records=records, has_more=bool(payload.get("has_more")))
