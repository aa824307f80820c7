"""
Core Components

Configuration and logging setup.
"""

from selectkit.core.config import settings, Settings
from selectkit.core.logging import configure_logging

__all__ = [
    "settings",
    "Settings",
    "configure_logging",
]
