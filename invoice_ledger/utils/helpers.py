"""
Helper Utilities Module.

Generic file and formatting helpers used across the invoice ledger.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - format_money: Render a monetary value with fixed decimals
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/exports")
        PosixPath('outputs/exports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the lowercase file extension, including the dot.

    Example:
        >>> get_file_extension("invoice.PDF")
        '.pdf'
        >>> get_file_extension("noextension")
        ''
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """
    Generate a formatted timestamp string.

    Example:
        >>> generate_timestamp("%Y-%m-%d")
        '2026-10-19'
    """
    return datetime.now().strftime(format_str)


def format_money(value: Any, decimals: int = 2) -> str:
    """
    Render a monetary value with a fixed number of decimals.

    Non-numeric values (None, empty strings, free text) are returned as
    their string form so that exports never drop a cell.

    Example:
        >>> format_money(10)
        '10.00'
        >>> format_money(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return f"{value:.{decimals}f}"
    return str(value)
