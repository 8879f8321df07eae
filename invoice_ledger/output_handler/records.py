"""
Export Record Shaping.

Turns ledger records into export rows. Exports are flat: internal
identity and bookkeeping fields are stripped, columns follow the record's
wire-field order, and rows keep the order they were given in.

Author: ML Engineering Team
"""

from typing import Any, Dict, Iterable, List

from invoice_ledger.store.models import EntityKind, LedgerRecord, record_type
from invoice_ledger.utils.helpers import format_money

# Wire names never written to an export, per kind
EXCLUDED_FIELDS = {
    EntityKind.INVOICE: frozenset({'id', 'missingFields', 'customerId', 'productId'}),
    EntityKind.PRODUCT: frozenset({'id', 'missingFields'}),
    EntityKind.CUSTOMER: frozenset({'id', 'missingFields'}),
}


def export_columns(kind: EntityKind) -> List[str]:
    """Wire names of the exported columns, in order."""
    kind = EntityKind(kind)
    return [
        wire_name for wire_name in record_type(kind).WIRE_FIELDS
        if wire_name not in EXCLUDED_FIELDS[kind]
    ]


def export_rows(records: Iterable[LedgerRecord], kind: EntityKind) -> List[Dict[str, Any]]:
    """
    Build export rows with raw values.

    Example:
        >>> export_rows([invoice], EntityKind.INVOICE)[0].keys()
        dict_keys(['serialNumber', 'customerName', 'productName', 'quantity', 'tax', 'totalAmount', 'date'])
    """
    columns = export_columns(kind)
    return [{column: record.get(column) for column in columns} for record in records]


def format_cell(kind: EntityKind, column: str, value: Any, decimals: int = 2) -> str:
    """Render one exported value as text; money gets fixed decimals."""
    if column in record_type(EntityKind(kind)).MONEY_FIELDS:
        return format_money(value, decimals)
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
