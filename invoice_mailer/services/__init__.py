"""External service adapters."""

from .fetcher import Fetcher, RateLimitedFetcher, RateLimiter
from .mailer import Mailer, SmtpMailer
from .stripe import RecordSource, StripeInvoiceSource

__all__ = [
    "Fetcher",
    "RateLimitedFetcher",
    "RateLimiter",
    "Mailer",
    "SmtpMailer",
    "RecordSource",
    "StripeInvoiceSource",
]
