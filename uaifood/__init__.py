"""
                UaiFood Restaurant Ordering API

Backend for a restaurant: accounts with JWT authentication, menu catalog,
per-user address book and order placement/fulfillment tracking.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
