"""
HTTP route modules, one APIRouter per resource.
"""

from uaifood.routers import addresses, categories, items, orders, users

ALL_ROUTERS = [
    users.router,
    categories.router,
    items.router,
    addresses.router,
    orders.router,
]

__all__ = ["ALL_ROUTERS"]
