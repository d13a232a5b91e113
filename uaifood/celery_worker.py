"""
Celery Worker Configuration
Redis is both the message broker and the result backend for the order ledger.

Run with:
    celery -A uaifood.celery_worker worker --loglevel=info

The worker process has no application factory, so it reads its settings from
the environment. The API process calls configure_celery() with the Settings it
was built with, so order events are published to that Redis instance.
"""

import logging

from celery import Celery

from uaifood.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_worker_settings = get_settings()

celery_app = Celery(
    'uaifood_worker',
    broker=_worker_settings.redis_url,
    backend=_worker_settings.redis_url,
    include=['uaifood.tasks']
)

celery_app.conf.update(
    # Ledger rows are plain dicts
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,

    # One Excel write at a time per worker process; the file lock serializes the rest
    worker_prefetch_multiplier=1,
    worker_concurrency=4,

    result_expires=3600,

    # A row is only acknowledged once it is in the workbook
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    broker_connection_retry_on_startup=True,
)


def configure_celery(settings: Settings) -> Celery:
    """Point the broker and result backend at `settings.redis_url`."""
    celery_app.conf.update(
        broker_url=settings.redis_url,
        result_backend=settings.redis_url,
    )
    logger.debug(f"Celery broker set to {settings.redis_url}")
    return celery_app


if __name__ == '__main__':
    celery_app.start()
