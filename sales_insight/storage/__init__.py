"""
Storage package for Sales Insight.

Owns the flat-file format and bulk load/save of the product index. Keep this
layer focused on I/O, decoupled from the CLI.
"""

from sales_insight.storage.flat_file import (
    LoadReport,
    format_line,
    load_index,
    parse_line,
    save_index,
)

__all__ = [
    "LoadReport",
    "format_line",
    "load_index",
    "parse_line",
    "save_index",
]
