"""
Excel Ledger Manager with Concurrency Control

Appends one row per order event (creation, status change) to an Excel
workbook. Several Celery workers may write at once, so every read-modify-write
happens under a file lock.

Author: UaiFood Team
Version: 1.0.0
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Union

import pandas as pd
from filelock import FileLock, Timeout

logger = logging.getLogger(__name__)


class ExcelManager:
    """Lock-protected Excel order ledger."""

    ORDER_COLUMNS = [
        "order_id",
        "event",
        "date_time",
        "client_id",
        "client_name",
        "payment_method",
        "order_status",
        "line_count",
        "total_amount",
        "exported_at",
    ]

    def __init__(
        self,
        data_directory: Union[str, Path],
        filename: str = "orders.xlsx",
        lock_timeout: int = 30,
    ):
        self.data_dir = Path(data_directory)
        self.orders_file = self.data_dir / filename
        self.lock_file = self.data_dir / f"{filename}.lock"
        self.lock_timeout = lock_timeout

    def _ensure_data_dir(self) -> None:
        """Create data directory if needed."""
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {self.data_dir}")

    def _load_or_create_df(self) -> pd.DataFrame:
        """
        Load the existing ledger, or start an empty one if there is no file yet.

        An existing file that cannot be read is an error: writing a fresh
        frame over it would drop every earlier row.
        """
        if not self.orders_file.exists():
            return pd.DataFrame(columns=self.ORDER_COLUMNS)

        try:
            return pd.read_excel(self.orders_file, engine="openpyxl")
        except Exception as e:
            logger.error(f"Cannot read ledger {self.orders_file}: {e}")
            raise

    def export_order(self, order_data: dict[str, Any]) -> dict[str, Any]:
        """
        Append an order event row with file locking.

        Lock timeouts are reported in the result; an unreadable workbook
        raises so the Celery task can retry.
        """
        self._ensure_data_dir()

        order_id = order_data.get("order_id", 0)
        result = {
            "success": False,
            "message": "",
            "order_id": order_id,
            "exported_at": None,
        }

        try:
            lock = FileLock(str(self.lock_file), timeout=self.lock_timeout)

            with lock:
                logger.debug(f"Lock acquired for Order #{order_id}")

                df = self._load_or_create_df()

                export_time = datetime.now().isoformat()
                new_row = {
                    "order_id": order_id,
                    "event": order_data.get("event", "created"),
                    "date_time": order_data.get("created_at", export_time),
                    "client_id": order_data.get("client_id"),
                    "client_name": order_data.get("client_name"),
                    "payment_method": order_data.get("payment_method"),
                    "order_status": order_data.get("order_status"),
                    "line_count": order_data.get("line_count", 0),
                    "total_amount": order_data.get("total_amount"),
                    "exported_at": export_time,
                }

                if df.empty:
                    df = pd.DataFrame([new_row], columns=self.ORDER_COLUMNS)
                else:
                    df = pd.concat([df, pd.DataFrame([new_row])], ignore_index=True)
                df.to_excel(str(self.orders_file), index=False, engine="openpyxl")

                logger.info(f"Order #{order_id} ({new_row['event']}) exported to Excel")

                result["success"] = True
                result["message"] = f"Order #{order_id} exported"
                result["exported_at"] = export_time

            logger.debug(f"Lock released for Order #{order_id}")

        except Timeout:
            result["message"] = f"Lock timeout ({self.lock_timeout}s)"
            logger.error(f"Lock timeout for Order #{order_id}")

        return result

    def get_all_orders(self) -> list[dict[str, Any]]:
        """Get all ledger rows."""
        if not self.orders_file.exists():
            return []

        try:
            df = pd.read_excel(self.orders_file, engine="openpyxl")
            return df.to_dict("records")
        except Exception as e:
            logger.error(f"Error reading orders: {e}")
            return []

    def clear_all(self) -> bool:
        """Delete the ledger and its lock file."""
        try:
            for f in [self.orders_file, self.lock_file]:
                if f.exists():
                    f.unlink()
            logger.info("Excel ledger cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing files: {e}")
            return False
