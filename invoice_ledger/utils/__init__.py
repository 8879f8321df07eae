"""
Utility Module for the Invoice Ledger.

Common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - File and formatting helpers
    - Record identity generation
"""

from .logger import setup_logger, set_log_level, get_logger
from .helpers import ensure_directory, get_file_extension, generate_timestamp, format_money
from .identity import new_id

__all__ = [
    'setup_logger',
    'set_log_level',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp',
    'format_money',
    'new_id'
]
