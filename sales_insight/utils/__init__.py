"""
Utilities package for Sales Insight.

Exports shared helpers for logging and profiling. Keep this package free of
domain-specific logic.
"""

from sales_insight.utils.logging import configure_logging, get_logger
from sales_insight.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
