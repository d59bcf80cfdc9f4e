"""
Celery tasks for the scheduled license sweeps.

Scheduled through CELERY_BEAT_SCHEDULE in settings.
"""
import logging

from celery import shared_task

from licenses.infrastructure.services import get_sweep_service

logger = logging.getLogger(__name__)


@shared_task
def send_license_reminders() -> dict:
    """
    Email renewal reminders for licenses about to expire.

    Returns:
        Sweep counts
    """
    result = get_sweep_service().send_reminders()
    logger.info("send_license_reminders: %s", result)
    return {"found": result.found, "sent": result.processed, "failed": result.failed}


@shared_task
def expire_plugin_licenses() -> dict:
    """
    Flag licenses past their expiry date as expired.

    Returns:
        Sweep counts
    """
    result = get_sweep_service().expire_licenses()
    logger.info("expire_plugin_licenses: %s", result)
    return {"found": result.found, "expired": result.processed, "failed": result.failed}
