"""
Request Ledger Celery Tasks

Periodic repair work for the request lifecycle:
- Finishing completions interrupted between recording and retiring a request
- Retrying payouts that failed with a retryable gateway error
"""

import logging

from celery import shared_task
from django.db import DatabaseError

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, queue="ledger_tasks")
def recover_request_migrations_task(self):
    """
    Run the recovery sweep.

    Returns:
        dict: Number of requests repaired
    """
    from infrastructure.container import container

    try:
        result = container.request_ledger_service().recover_migrations()
    except DatabaseError as exc:
        logger.error(f"Recovery sweep failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60)

    logger.info(f"Recovery sweep repaired {result.value} request(s)")
    return {"success": result.ok, "recovered": result.value}


@shared_task(bind=True, max_retries=3, queue="ledger_tasks")
def retry_failed_payouts_task(self):
    """
    Retry completions whose payout failed with a retryable gateway error.

    Returns:
        dict: Number of requests completed by this run
    """
    from infrastructure.container import container

    try:
        result = container.request_ledger_service().retry_failed_payouts()
    except DatabaseError as exc:
        logger.error(f"Payout retry run failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60)

    return {"success": result.ok, "completed": result.value}
