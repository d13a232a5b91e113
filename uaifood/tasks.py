"""
Celery Tasks
Background tasks that keep the Excel order ledger up to date.
"""

import logging
import time
from datetime import datetime

from uaifood.celery_worker import celery_app
from uaifood.core.config import get_settings
from uaifood.services.excel_manager import ExcelManager

logger = logging.getLogger(__name__)


def get_excel_manager() -> ExcelManager:
    settings = get_settings()
    return ExcelManager(
        settings.data_directory,
        filename=settings.excel_filename,
        lock_timeout=settings.excel_lock_timeout,
    )


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(Exception,),
    retry_backoff=True
)
def export_order_to_excel(self, order_data: dict) -> dict:
    """
    Append an order event to the Excel ledger.
    This task runs asynchronously via Celery worker.

    Args:
        order_data: Row produced by uaifood.services.ledger.build_ledger_row

    Returns:
        dict: Result of the export operation
    """
    task_id = self.request.id
    order_id = order_data.get('order_id', 'unknown')

    logger.info(f"Task {task_id}: Processing order #{order_id}")
    start_time = time.time()

    result = get_excel_manager().export_order(order_data)

    elapsed = round(time.time() - start_time, 3)
    result['task_id'] = task_id
    result['processing_time_seconds'] = elapsed

    if result['success']:
        logger.info(f"Task {task_id}: Order #{order_id} completed in {elapsed}s")
    else:
        logger.warning(f"Task {task_id}: Order #{order_id} failed - {result['message']}")

    return result


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now().isoformat()
    }


@celery_app.task
def clear_excel_ledger() -> dict:
    """
    Clear the Excel ledger (for testing/reset purposes).
    """
    success = get_excel_manager().clear_all()
    return {
        'success': success,
        'message': 'Excel ledger cleared' if success else 'Failed to clear Excel ledger',
        'timestamp': datetime.now().isoformat()
    }
