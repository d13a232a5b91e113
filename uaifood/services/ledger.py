"""
Order Ledger Queue

Turns an order into a flat ledger row and hands it to the Celery worker.
The order is already committed when this runs, so a broker outage is logged
and never turned into a failed request.
"""

import asyncio
import logging
from typing import Any

from uaifood.core.config import Settings
from uaifood.models import Order
from uaifood.tasks import export_order_to_excel

logger = logging.getLogger(__name__)


def build_ledger_row(order: Order, event: str) -> dict[str, Any]:
    """Serialize an order (with lines and client loaded) for the JSON task queue."""
    return {
        "order_id": order.id,
        "event": event,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "client_id": order.client_id,
        "client_name": order.client.name if order.client else None,
        "payment_method": order.payment_method.value,
        "order_status": order.status,
        "line_count": len(order.order_items),
        "total_amount": str(order.total_amount),
    }


async def queue_order_event(settings: Settings, order: Order, event: str) -> bool:
    """
    Queue a ledger export for `order`.

    Publishing talks to Redis synchronously, so it runs in a worker thread.

    Returns:
        True if the task was handed to the broker
    """
    if not settings.ledger_export_enabled:
        return False

    row = build_ledger_row(order, event)
    try:
        await asyncio.to_thread(export_order_to_excel.apply_async, args=[row], retry=False)
    except Exception as e:
        logger.error(f"Could not queue ledger export for Order #{order.id}: {e}")
        return False

    logger.debug(f"Ledger export queued for Order #{order.id} ({event})")
    return True
