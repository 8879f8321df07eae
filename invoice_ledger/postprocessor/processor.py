"""
Record Post-Processor Module.

This module provides the RecordNormalizer that cleans a raw attribute bag
returned by the extraction service before it becomes a ledger record.

Operations:
    - Drop keys that are not part of the record shape
    - Trim text fields
    - Coerce numeric fields given as strings
    - Normalize invoice dates to YYYY-MM-DD
    - Keep a non-empty `missingFields` list supplied by the service

Author: ML Engineering Team
"""

from typing import Any, Dict, Mapping, Optional

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.store.models import EntityKind, record_type
from .normalizers import AmountNormalizer, DateNormalizer, QuantityNormalizer

# Initialize module logger
logger = get_logger(__name__)

DATE_FIELDS = ('date',)
QUANTITY_FIELDS = ('quantity',)


class RecordNormalizer:
    """
    Normalizes raw extracted records into wire-format dictionaries.

    Attributes:
        normalize_values: When False, only unknown keys are dropped.

    Example:
        >>> normalizer = RecordNormalizer()
        >>> normalizer.normalize({"serialNumber": " S1 ", "quantity": "2",
        ...                       "totalAmount": "₹1,050.00", "vendor": "x"}, "invoice")
        {'serialNumber': 'S1', 'quantity': 2, 'totalAmount': 1050.0}
    """

    def __init__(self, normalize_values: Optional[bool] = None) -> None:
        """Initialize the normalizer with its value converters."""
        if normalize_values is None:
            normalize_values = get_config("ingestion.normalize_values", True)
        self.normalize_values = normalize_values

        self.amount_normalizer = AmountNormalizer()
        self.quantity_normalizer = QuantityNormalizer(self.amount_normalizer)
        self.date_normalizer = DateNormalizer()

        logger.debug(f"RecordNormalizer initialized (normalize_values={self.normalize_values})")

    def normalize(self, raw: Mapping[str, Any], kind: EntityKind) -> Dict[str, Any]:
        """
        Normalize one raw record.

        Args:
            raw: Attribute bag as returned by the extraction service.
            kind: Entity kind the record belongs to.

        Returns:
            Dictionary keyed by wire names, without an `id`.
        """
        cls = record_type(kind)
        normalized: Dict[str, Any] = {}

        for wire_name in cls.WIRE_FIELDS:
            if wire_name not in raw:
                continue
            value = raw[wire_name]
            if self.normalize_values:
                value = self._normalize_value(wire_name, value, wire_name in cls.NUMERIC_FIELDS)
            normalized[wire_name] = value

        missing = raw.get('missingFields')
        if isinstance(missing, (list, tuple)) and missing:
            normalized['missingFields'] = [str(name) for name in missing]

        dropped = set(raw) - set(cls.WIRE_FIELDS) - {'missingFields', 'id'}
        if dropped:
            logger.debug(f"Dropped unknown {EntityKind(kind).value} keys: {sorted(dropped)}")

        return normalized

    def _normalize_value(self, wire_name: str, value: Any, numeric: bool) -> Any:
        if value is None:
            return None

        if numeric:
            if wire_name in QUANTITY_FIELDS:
                return self.quantity_normalizer.to_quantity(value)
            return self.amount_normalizer.to_number(value)

        text = str(value).strip()
        if wire_name in DATE_FIELDS and text:
            # Unparsable dates are kept verbatim for the user to correct
            return self.date_normalizer.normalize(text) or text
        return text
