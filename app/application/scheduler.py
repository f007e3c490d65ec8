"""
Background scheduler - runs periodic jobs inside the FastAPI process.

Jobs:
  - Scheduled payments processing (every SCHEDULED_PAYMENTS_INTERVAL_MINUTES)
"""
import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import get_settings

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(daemon=True)


def _run_scheduled_payments():
    from app.infrastructure.db.session import get_session_factory
    from app.application.scheduled_payments import process_all_due

    Session = get_session_factory()
    db = Session()
    try:
        result = process_all_due(db)
        if result.created_transactions or result.failed_payment_ids:
            logger.info(
                "Scheduled payments job: %d transactions booked, %d payments failed",
                len(result.created_transactions), len(result.failed_payment_ids),
            )
    except Exception:
        logger.exception("Scheduled payments job failed")
    finally:
        db.close()


def start_scheduler():
    """Start the background scheduler with all periodic jobs."""
    settings = get_settings()

    scheduler.add_job(
        _run_scheduled_payments,
        "interval",
        minutes=settings.SCHEDULED_PAYMENTS_INTERVAL_MINUTES,
        id="scheduled_payments",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        "Scheduler started: scheduled_payments (every %d min)",
        settings.SCHEDULED_PAYMENTS_INTERVAL_MINUTES,
    )


def shutdown_scheduler():
    """Gracefully stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
