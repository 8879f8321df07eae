"""
Value Normalizers Module.

Normalizers applied to extracted field values before records enter the
ledger:
    - Date strings to ISO format (YYYY-MM-DD)
    - Amount strings ("₹1,234.50", "1.234,50 EUR") to numbers
    - Quantities to integers when integral

Author: ML Engineering Team
"""

import math
import re
from datetime import datetime
from typing import Any, Optional, Union
from dateutil import parser as date_parser

from config import get_config
from invoice_ledger.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

Number = Union[int, float]


class DateNormalizer:
    """
    Normalizes date strings to a standard format.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize("15/01/2026")
        '2026-01-15'
        >>> normalizer.normalize("January 15, 2026")
        '2026-01-15'
    """

    def __init__(self) -> None:
        """Initialize the date normalizer with configuration."""
        self.output_format = get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )
        self.input_formats = get_config(
            "postprocessing.date.input_formats",
            [
                "%Y-%m-%d",
                "%d/%m/%Y",
                "%d-%m-%Y",
                "%d.%m.%Y",
                "%B %d, %Y",
                "%b %d, %Y",
                "%d %B %Y",
                "%d %b %Y",
            ]
        )

        logger.debug(f"DateNormalizer initialized (output: {self.output_format})")

    def normalize(self, date_str: str) -> Optional[str]:
        """
        Normalize a date string to the configured output format.

        Args:
            date_str: Input date string in any recognized format.

        Returns:
            Normalized date string, or None if parsing fails.
        """
        if not date_str:
            return None

        date_str = self._clean_date_string(date_str)

        parsed_date = self._try_explicit_formats(date_str)
        if parsed_date is None:
            parsed_date = self._try_dateutil_parser(date_str)

        if parsed_date:
            return parsed_date.strftime(self.output_format)

        logger.debug(f"Could not parse date: {date_str}")
        return None

    def _clean_date_string(self, date_str: str) -> str:
        """Collapse whitespace and strip ordinal suffixes (1st, 2nd, ...)."""
        date_str = ' '.join(str(date_str).split())
        date_str = re.sub(r'(\d+)(st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)
        return date_str.strip()

    def _try_explicit_formats(self, date_str: str) -> Optional[datetime]:
        for fmt in self.input_formats:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue
        return None

    def _try_dateutil_parser(self, date_str: str) -> Optional[datetime]:
        # Invoices in this ledger are mostly day-first
        try:
            return date_parser.parse(date_str, dayfirst=True)
        except (ValueError, OverflowError):
            return None


class AmountNormalizer:
    """
    Converts amount values to numbers.

    Handles currency symbols and codes, thousand separators and the
    European comma-decimal format.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_number("₹1,234.50")
        1234.5
        >>> normalizer.to_number("€ 1.234,56")
        1234.56
        >>> normalizer.to_number("n/a") is None
        True
    """

    CURRENCY_SYMBOLS = ['$', '€', '£', '¥', '₹', 'Rs.', 'Rs']
    CURRENCY_CODES = ['USD', 'EUR', 'GBP', 'JPY', 'INR']

    def __init__(self) -> None:
        """Initialize the amount normalizer with configuration."""
        self.currency_symbols = get_config(
            "postprocessing.amount.currency_symbols",
            self.CURRENCY_SYMBOLS
        )
        self.currency_codes = get_config(
            "postprocessing.amount.currency_codes",
            self.CURRENCY_CODES
        )

    def to_number(self, value: Any) -> Optional[Number]:
        """
        Convert a raw amount to a number.

        Args:
            value: Number or amount string.

        Returns:
            The numeric value, or None if it cannot be read as a number.
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return None if isinstance(value, float) and math.isnan(value) else value

        amount_str = self._clean_amount_string(str(value))
        if not amount_str:
            return None

        amount_str = self._handle_european_format(amount_str)
        amount_str = amount_str.replace(',', '')

        try:
            return float(amount_str)
        except ValueError:
            logger.debug(f"Could not parse amount: {value!r}")
            return None

    def _clean_amount_string(self, amount_str: str) -> str:
        """Strip currency markers and keep digits, separators and sign."""
        amount_str = ' '.join(amount_str.split())

        for symbol in self.currency_symbols:
            amount_str = amount_str.replace(symbol, '')

        for code in self.currency_codes:
            amount_str = re.sub(rf'\b{code}\b', '', amount_str, flags=re.IGNORECASE)

        if re.search(r'[A-Za-z]', amount_str):
            return ''

        amount_str = re.sub(r'[^\d,.\-]', '', amount_str)
        return amount_str.strip()

    def _handle_european_format(self, amount_str: str) -> str:
        """Convert '1.234,56' to '1234.56'; leave other forms alone."""
        if amount_str.count(',') == 1:
            comma_pos = amount_str.rfind(',')
            dot_pos = amount_str.rfind('.')

            if comma_pos > dot_pos:
                after_comma = amount_str[comma_pos + 1:]
                if len(after_comma) <= 2 and after_comma.isdigit():
                    amount_str = amount_str.replace('.', '')
                    amount_str = amount_str.replace(',', '.')

        return amount_str


class QuantityNormalizer:
    """
    Converts quantity values to integers where possible.

    Example:
        >>> QuantityNormalizer().to_quantity("3")
        3
        >>> QuantityNormalizer().to_quantity(2.5)
        2.5
    """

    def __init__(self, amount_normalizer: Optional[AmountNormalizer] = None) -> None:
        self.amount_normalizer = amount_normalizer or AmountNormalizer()

    def to_quantity(self, value: Any) -> Optional[Number]:
        number = self.amount_normalizer.to_number(value)
        if number is None:
            return None
        if float(number).is_integer():
            return int(number)
        return number
