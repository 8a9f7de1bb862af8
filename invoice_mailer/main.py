"""
FastAPI application for triggering invoice bundling runs.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from invoice_mailer.config import settings
from invoice_mailer.core.logging import configure_logging, get_logger
from invoice_mailer.core.models import InvalidWindowError, TimeWindow
from invoice_mailer.core.window import month_window, parse_year_month, scheduled_window
from invoice_mailer.processors.pipeline import run_invoice_job
from invoice_mailer.scheduler import start_scheduler, stop_scheduler

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    configure_logging(settings.log_level, settings.json_logs)
    log.info("application_starting")

    if settings.scheduler_enabled:
        start_scheduler()
    else:
        log.info("scheduler_disabled", reason="use /scheduled or the CLI to run manually")

    yield

    if settings.scheduler_enabled:
        stop_scheduler()
    log.info("application_stopped")


app = FastAPI(
    title="Invoice Mailer",
    description="Bundles monthly Stripe invoice PDFs and emails them",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a client error (400), not 422."""
    return JSONResponse(status_code=400, content={"message": "Invalid request body."})


# Request Models

class GenerateRequest(BaseModel):
    year: int | str | None = None
    month: int | str | None = None


def _execute(window: TimeWindow) -> JSONResponse:
    try:
        result = run_invoice_job(window)
    except InvalidWindowError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})
    except Exception as e:
        log.error("invoice_job_failed", period=window.period, error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "message": str(e)})
    return JSONResponse(status_code=200, content=result.to_dict())


# Endpoints

@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.post("/generate-and-email")
def generate_and_email(request: GenerateRequest):
    """
    Bundle and email invoices for one calendar month.

    Body: {"year": 2025, "month": 1}. Month is 1-12.
    """
    try:
        year, month = parse_year_month(request.year, request.month)
        window = month_window(year, month, settings.timezone)
    except InvalidWindowError as e:
        return JSONResponse(status_code=400, content={"message": str(e)})

    log.info("manual_run_requested", year=year, month=month)
    return _execute(window)


@app.get("/scheduled")
def run_scheduled():
    """Run the scheduled policy now (previous calendar month by default)."""
    try:
        window = scheduled_window(settings.scheduled_window_policy, tz=settings.timezone)
    except ValueError as e:
        log.error("invalid_window_policy", error=str(e))
        return JSONResponse(status_code=500, content={"success": False, "message": str(e)})

    log.info("scheduled_run_requested", period=window.period)
    return _execute(window)


# Run with: uvicorn invoice_mailer.main:app --host 0.0.0.0 --port 8000
