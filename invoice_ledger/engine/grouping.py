"""
Invoice Grouping Module.

Derives logical invoices from flat invoice line items. Line items that
share a serial number (exact, case-sensitive match) form one
GroupedInvoice whose quantity, tax and total are the sums of its members
and whose missing fields are the union of its members'.

Groups are never stored. They are recomputed from the flat collection on
every read, so the aggregates always equal the current member values.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from invoice_ledger.store.models import Invoice


@dataclass
class GroupedInvoice:
    """
    A logical invoice made of every line item sharing one serial number.

    Attributes:
        id: Id of the first member in collection order
        serial_number: Shared serial number
        customer_name: Customer name of the first member
        product_names: Product name of each member, in collection order
        invoice_ids: Id of each member, in collection order
        quantity: Sum of member quantities (missing counts as 0)
        tax: Sum of member tax
        total_amount: Sum of member totals
        date: Date of the first member
        missing_fields: Union of member missing fields, or None
    """
    id: str
    serial_number: Optional[str]
    customer_name: Optional[str]
    product_names: List[Optional[str]] = field(default_factory=list)
    invoice_ids: List[str] = field(default_factory=list)
    quantity: float = 0
    tax: float = 0
    total_amount: float = 0
    date: Optional[str] = None
    missing_fields: Optional[List[str]] = None

    @property
    def member_count(self) -> int:
        return len(self.invoice_ids)

    @property
    def is_single_product(self) -> bool:
        return len(self.invoice_ids) == 1

    def get(self, wire_name: str, default: Any = None) -> Any:
        """Get a value by wire name, as used by table search and sort."""
        return self.to_dict().get(wire_name, default)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'serialNumber': self.serial_number,
            'customerName': self.customer_name,
            'productNames': list(self.product_names),
            'invoiceIds': list(self.invoice_ids),
            'quantity': self.quantity,
            'tax': self.tax,
            'totalAmount': self.total_amount,
            'date': self.date,
        }
        if self.missing_fields:
            data['missingFields'] = list(self.missing_fields)
        return data


def group_by_serial(invoices: Iterable[Invoice]) -> List[GroupedInvoice]:
    """
    Group flat invoices by serial number.

    Single left-to-right pass. Groups come out in order of first
    appearance of each serial number.

    Args:
        invoices: Flat invoice records in collection order.

    Returns:
        List of GroupedInvoice.

    Example:
        >>> groups = group_by_serial([
        ...     Invoice(id="a", serial_number="S1", product_name="Pen", quantity=2, tax=1, total_amount=10),
        ...     Invoice(id="b", serial_number="S1", product_name="Cup", quantity=1, tax=0.5, total_amount=5),
        ... ])
        >>> groups[0].product_names, groups[0].quantity, groups[0].total_amount
        (['Pen', 'Cup'], 3, 15)
    """
    groups: Dict[Optional[str], GroupedInvoice] = {}

    for invoice in invoices:
        group = groups.get(invoice.serial_number)

        if group is None:
            groups[invoice.serial_number] = GroupedInvoice(
                id=invoice.id,
                serial_number=invoice.serial_number,
                customer_name=invoice.customer_name,
                product_names=[invoice.product_name],
                invoice_ids=[invoice.id],
                quantity=invoice.quantity or 0,
                tax=invoice.tax or 0,
                total_amount=invoice.total_amount or 0,
                date=invoice.date,
                missing_fields=list(invoice.missing_fields) if invoice.missing_fields else None,
            )
            continue

        group.product_names.append(invoice.product_name)
        group.invoice_ids.append(invoice.id)
        group.quantity += invoice.quantity or 0
        group.tax += invoice.tax or 0
        group.total_amount += invoice.total_amount or 0

        if invoice.missing_fields:
            combined = list(group.missing_fields or [])
            for name in invoice.missing_fields:
                if name not in combined:
                    combined.append(name)
            group.missing_fields = combined

    return list(groups.values())


def find_group(groups: Iterable[GroupedInvoice], group_id: str) -> Optional[GroupedInvoice]:
    """Return the group whose id (first member id) matches, or None."""
    for group in groups:
        if group.id == group_id:
            return group
    return None
