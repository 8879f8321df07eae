"""
Missing-Field Validator Module.

Computes which required attributes of a record are absent. The result is
a pure function of the record's current values and is stored on the
record as `missing_fields` after every create and update.

Presence rules:
    - numeric fields: present when the value is a real number, zero included
    - text fields: present when non-empty after trimming

An all-present record yields None ("no marker"), never an empty list.

Author: ML Engineering Team
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from invoice_ledger.store.models import EntityKind, LedgerRecord, record_type

R = TypeVar("R", bound=LedgerRecord)

REQUIRED_FIELDS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.INVOICE: (
        'serialNumber',
        'customerName',
        'productName',
        'quantity',
        'tax',
        'totalAmount',
        'date',
    ),
    EntityKind.PRODUCT: (
        'name',
        'quantity',
        'unitPrice',
        'tax',
        'priceWithTax',
    ),
    EntityKind.CUSTOMER: (
        'name',
        'phoneNumber',
        'totalPurchaseAmount',
    ),
}


def is_number_present(value: Any) -> bool:
    """True for any real number including zero; False for None, NaN, bools and text."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def is_text_present(value: Any) -> bool:
    """True for strings that are non-empty after trimming."""
    if value is None:
        return False
    return str(value).strip() != ""


def compute_missing(
    record: Union[LedgerRecord, Mapping[str, Any]],
    kind: Union[EntityKind, str]
) -> Optional[List[str]]:
    """
    Compute the required fields a record is missing.

    Args:
        record: A ledger record, or a wire-format mapping.
        kind: Entity kind the record belongs to.

    Returns:
        Wire names of missing fields in declaration order, or None when
        every required field is present.

    Example:
        >>> compute_missing({"name": "Ann", "phoneNumber": "", "totalPurchaseAmount": 0}, "customer")
        ['phoneNumber']
        >>> compute_missing({"name": "Ann", "phoneNumber": "555", "totalPurchaseAmount": 0}, "customer")
    """
    kind = EntityKind(kind)
    numeric_fields = record_type(kind).NUMERIC_FIELDS

    # records and mappings both expose get(wire_name)
    missing = []
    for wire_name in REQUIRED_FIELDS[kind]:
        value = record.get(wire_name)
        if wire_name in numeric_fields:
            present = is_number_present(value)
        else:
            present = is_text_present(value)
        if not present:
            missing.append(wire_name)

    return missing or None


def with_missing_fields(record: R) -> R:
    """Return a copy of the record with missing_fields recomputed."""
    return record.replace(missing_fields=compute_missing(record, record.KIND))
