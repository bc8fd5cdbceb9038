import atexit
import logging
from datetime import datetime, timedelta

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def init_scheduler(app):
    """Start the background scheduler that runs queued notification jobs."""
    if not app.config.get("NOTIFICATIONS_ASYNC"):
        logger.info("[SCHEDULER] Async notifications disabled; emails are sent inline")
        return

    if not scheduler.running:
        scheduler.start()
        logger.info("[SCHEDULER] Scheduler started")
        # Shut down the scheduler when exiting the app
        atexit.register(shutdown_scheduler)
    else:
        logger.info("[SCHEDULER] Scheduler already running (skipping duplicate start)")


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("[SCHEDULER] Scheduler stopped")


def schedule_once(func, args, delay_seconds=0):
    """Queue ``func(*args)`` to run once, ``delay_seconds`` from now."""
    run_date = datetime.now() + timedelta(seconds=delay_seconds)
    return scheduler.add_job(
        func,
        "date",
        run_date=run_date,
        args=args,
        misfire_grace_time=None,
    )
