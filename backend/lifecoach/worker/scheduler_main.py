"""Scheduler worker: sends the daily nudge reminder e-mails.

Run with ``python -m lifecoach.worker.scheduler_main`` next to the API
process. The same job is reachable over HTTP through ``POST /cron/nudge-reminder``
for hosts that prefer an external cron.
"""
from __future__ import annotations

import logging
import signal
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from lifecoach.core.config import settings
from lifecoach.core.context import bind_request_id, new_request_id
from lifecoach.core.logging import configure_logging
from lifecoach.db.session import SessionLocal
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.job_runner import run_nudge_reminders_for_all_users

NUDGE_REMINDER_JOB_ID = "nudge_reminder_job"

logger = logging.getLogger(__name__)


def main() -> None:
    configure_logging(log_level=settings.log_level)
    logger.info("Scheduler worker starting (enabled=%s)", settings.scheduler_enabled)

    scheduler = build_scheduler()
    if scheduler is None:
        logger.warning("Scheduler disabled via config; worker will idle")
    else:
        scheduler.start()
        if settings.jobs_run_on_startup:
            logger.info("Running nudge reminders once on startup")
            run_nudge_reminder_job()

    _wait_for_shutdown(scheduler)


def build_scheduler() -> BackgroundScheduler | None:
    if not settings.scheduler_enabled:
        return None
    scheduler = BackgroundScheduler(timezone=settings.scheduler_timezone)
    register_jobs(scheduler)
    return scheduler


def register_jobs(scheduler: BackgroundScheduler) -> None:
    scheduler.add_job(
        run_nudge_reminder_job,
        trigger="cron",
        hour=settings.nudge_job_hour,
        minute=settings.nudge_job_minute,
        id=NUDGE_REMINDER_JOB_ID,
        replace_existing=True,
        coalesce=True,
        max_instances=1,
    )
    logger.info(
        "Registered nudge reminder job (daily at %02d:%02d %s)",
        settings.nudge_job_hour,
        settings.nudge_job_minute,
        settings.scheduler_timezone,
    )


def run_nudge_reminder_job() -> None:
    with bind_request_id(new_request_id("job:nudge_reminder")) as request_id:
        session = SessionLocal()
        try:
            with trace("jobs.scheduled.nudge_reminder", request_id=request_id):
                result = run_nudge_reminders_for_all_users(session, request_id=request_id)
            log_metric("jobs.scheduled.emails_sent", result.emails_sent)
            log_metric("jobs.scheduled.failed", result.failed)
            logger.info("Nudge reminder job complete: %s", result.message)
        except Exception:  # pragma: no cover - keep the worker alive
            logger.exception("Nudge reminder job failed")
        finally:
            session.close()


def _wait_for_shutdown(scheduler: BackgroundScheduler | None) -> None:
    stop_event = threading.Event()

    def shutdown(signum, frame):  # pragma: no cover - signal handler
        logger.info("Scheduler worker shutting down (signal=%s)", signum)
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=False)
        stop_event.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    try:
        stop_event.wait()
    except KeyboardInterrupt:  # pragma: no cover - manual stop
        shutdown(signal.SIGINT, None)


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
