"""
                        Services Module

Business logic behind the HTTP routes. Every function takes an AsyncSession
and raises the tagged errors from uaifood.core.errors on failure.

Services:
    - users: registration, login, profile and admin account management
    - catalog: categories and menu items
    - addresses: per-user address book
    - orders: order placement, listing and status workflow
    - ownership: shared "resource belongs to caller" guard
    - ledger / excel_manager: Excel order ledger fed by Celery
"""

from uaifood.services.excel_manager import ExcelManager

__all__ = ["ExcelManager"]
