"""
APScheduler job runner for the monthly invoice job.
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from invoice_mailer.config import settings
from invoice_mailer.core.logging import get_logger

log = get_logger(__name__)

# Global scheduler instance
_scheduler: BackgroundScheduler | None = None


def monthly_invoice_job():
    """Scheduled job: bundle and email invoices for the scheduled window.

    The window comes from SCHEDULED_WINDOW_POLICY (previous calendar month
    by default).
    """
    from invoice_mailer.core.window import scheduled_window
    from invoice_mailer.processors.pipeline import run_invoice_job

    log.info("scheduled_job_starting", job="monthly_invoices")
    try:
        window = scheduled_window(settings.scheduled_window_policy, tz=settings.timezone)
        result = run_invoice_job(window)
        log.info(
            "scheduled_job_complete",
            job="monthly_invoices",
            success=result.success,
            period=window.period,
            log_lines=len(result.logs),
        )
    except Exception as e:
        log.error("scheduled_job_error", job="monthly_invoices", error=str(e))


def start_scheduler(day: int | None = None, hour: int | None = None) -> BackgroundScheduler:
    """
    Start the background scheduler with the monthly cron job.

    Args:
        day: Day of month to run (default: settings.scheduler_day)
        hour: Hour of day to run (default: settings.scheduler_hour)

    Returns:
        The scheduler instance
    """
    global _scheduler

    if _scheduler is not None:
        log.warning("scheduler_already_running")
        return _scheduler

    day = day or settings.scheduler_day
    hour = hour if hour is not None else settings.scheduler_hour

    _scheduler = BackgroundScheduler(timezone=settings.timezone)
    _scheduler.add_job(
        monthly_invoice_job,
        trigger=CronTrigger(day=day, hour=hour, minute=0, timezone=settings.timezone),
        id="monthly_invoices",
        name="Bundle and email monthly invoices",
        replace_existing=True,
    )

    _scheduler.start()
    log.info("scheduler_started", day=day, hour=hour, timezone=settings.timezone)

    return _scheduler


def stop_scheduler():
    """Stop the background scheduler."""
    global _scheduler

    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        log.info("scheduler_stopped")


def get_scheduler() -> BackgroundScheduler | None:
    """Get the current scheduler instance."""
    return _scheduler


def run_now():
    """Manually trigger the monthly job."""
    monthly_invoice_job()
