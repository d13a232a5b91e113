"""
Core module initialization.
Exports configuration and error utilities.
"""

from uaifood.core.config import get_settings, Settings, EnvironmentMode
from uaifood.core.errors import DomainError, ErrorKind, STATUS_BY_KIND

__all__ = [
    "get_settings",
    "Settings",
    "EnvironmentMode",
    "DomainError",
    "ErrorKind",
    "STATUS_BY_KIND",
]
