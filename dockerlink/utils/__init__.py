"""Utility modules for dockerlink."""

from .logging import get_logger, setup_logging
from .version import ComparableVersion, is_at_least

__all__ = [
    "setup_logging",
    "get_logger",
    "ComparableVersion",
    "is_at_least",
]
