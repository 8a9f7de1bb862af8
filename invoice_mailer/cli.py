"""
Invoice Mailer CLI

Runs one bundling job outside the HTTP service.

Usage:
    python -m invoice_mailer                        # Scheduled policy (previous month)
    python -m invoice_mailer --year 2025 --month 1  # Explicit month
    python -m invoice_mailer --console-logs         # Colored dev logs instead of JSON
"""

import argparse
import sys

from invoice_mailer.config import settings
from invoice_mailer.core.logging import configure_logging
from invoice_mailer.core.models import InvalidWindowError
from invoice_mailer.core.window import month_window, parse_year_month, scheduled_window
from invoice_mailer.processors.pipeline import run_invoice_job


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bundle and email Stripe invoice PDFs")
    parser.add_argument("--year", help="Year of the month to process (e.g. 2025)")
    parser.add_argument("--month", help="Month to process (1-12)")
    parser.add_argument(
        "--policy",
        default=None,
        help="Scheduled window policy when no year/month is given "
             "(previous_month or trailing_month)",
    )
    logs = parser.add_mutually_exclusive_group()
    logs.add_argument("--json-logs", dest="json_logs", action="store_true", default=None)
    logs.add_argument("--console-logs", dest="json_logs", action="store_false")
    parser.set_defaults(json_logs=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    json_logs = settings.json_logs if args.json_logs is None else args.json_logs
    configure_logging(settings.log_level, json_logs)

    try:
        if args.year is not None or args.month is not None:
            year, month = parse_year_month(args.year, args.month)
            window = month_window(year, month, settings.timezone)
        else:
            window = scheduled_window(
                args.policy or settings.scheduled_window_policy,
                tz=settings.timezone,
            )
    except ValueError as e:
        print(f"Invalid window: {e}", file=sys.stderr)
        return 2

    try:
        result = run_invoice_job(window)
    except InvalidWindowError as e:
        print(f"Invalid window: {e}", file=sys.stderr)
        return 2

    for line in result.logs:
        print(line)
    if result.message:
        print(result.message, file=sys.stderr)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
