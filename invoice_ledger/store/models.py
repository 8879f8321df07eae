"""
Ledger Record Models.

This module defines the three record shapes kept by the ledger: flat
invoice line items, products and customers. Attributes are snake_case in
Python; payloads, `missingFields` entries, exports and snapshots use the
camelCase wire names listed in each class's WIRE_FIELDS.

Records are joined to each other by name only (Invoice.customer_name to
Customer.name, Invoice.product_name to Product.name). The optional
customer_id / product_id back-references are carried through but never
enforced.

Author: ML Engineering Team
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar


class EntityKind(str, Enum):
    """Kinds of record held by the ledger."""
    INVOICE = "invoice"
    PRODUCT = "product"
    CUSTOMER = "customer"


R = TypeVar("R", bound="LedgerRecord")


class LedgerRecord:
    """
    Wire-format behaviour shared by all ledger records.

    Subclasses are dataclasses that declare:
        KIND: The EntityKind of the record.
        WIRE_FIELDS: Mapping of wire name to attribute name, in column order.
        NUMERIC_FIELDS: Wire names holding numbers.
        MONEY_FIELDS: Wire names rendered with two decimals on export.
        OPTIONAL_FIELDS: Wire names omitted from to_dict() when unset.
    """

    KIND: ClassVar[EntityKind]
    WIRE_FIELDS: ClassVar[Dict[str, str]]
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ()
    MONEY_FIELDS: ClassVar[Tuple[str, ...]] = ()
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ()

    id: str
    missing_fields: Optional[List[str]]

    def get(self, wire_name: str, default: Any = None) -> Any:
        """Get a field value by its wire name."""
        if wire_name == 'id':
            return self.id
        if wire_name == 'missingFields':
            return self.missing_fields
        attr = self.WIRE_FIELDS.get(wire_name)
        if attr is None:
            return default
        return getattr(self, attr, default)

    def replace(self: R, **changes: Any) -> R:
        """Return a copy of the record with the given attributes changed."""
        return dataclasses.replace(self, **changes)

    def to_dict(self, include_id: bool = True, include_missing: bool = True) -> Dict[str, Any]:
        """
        Convert to a wire-format dictionary.

        `missingFields` is omitted entirely when nothing is missing, and
        optional fields are omitted when unset.

        Args:
            include_id: Whether to include the `id` key.
            include_missing: Whether to include `missingFields`.

        Returns:
            Dictionary keyed by wire names.
        """
        data: Dict[str, Any] = {}
        if include_id:
            data['id'] = self.id
        for wire_name, attr in self.WIRE_FIELDS.items():
            value = getattr(self, attr)
            if value is None and wire_name in self.OPTIONAL_FIELDS:
                continue
            data[wire_name] = value
        if include_missing and self.missing_fields:
            data['missingFields'] = list(self.missing_fields)
        return data

    @classmethod
    def from_dict(cls: Type[R], data: Dict[str, Any], record_id: Optional[str] = None) -> R:
        """
        Build a record from a wire-format dictionary.

        Unknown keys are ignored. An empty `missingFields` list is stored
        as None.

        Args:
            data: Dictionary keyed by wire names.
            record_id: Identity to use instead of data['id'].

        Returns:
            Record instance.
        """
        kwargs = {
            attr: data.get(wire_name)
            for wire_name, attr in cls.WIRE_FIELDS.items()
        }
        missing = data.get('missingFields')
        kwargs['missing_fields'] = list(missing) if missing else None
        kwargs['id'] = record_id if record_id is not None else data.get('id')
        return cls(**kwargs)


@dataclass
class Invoice(LedgerRecord):
    """
    A flat invoice line item.

    One logical invoice with several products is stored as several
    Invoice records sharing the same serial_number.
    """
    id: str
    serial_number: Optional[str] = None
    customer_name: Optional[str] = None
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    tax: Optional[float] = None
    total_amount: Optional[float] = None
    date: Optional[str] = None
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    missing_fields: Optional[List[str]] = None

    KIND: ClassVar[EntityKind] = EntityKind.INVOICE
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'serialNumber': 'serial_number',
        'customerName': 'customer_name',
        'productName': 'product_name',
        'quantity': 'quantity',
        'tax': 'tax',
        'totalAmount': 'total_amount',
        'date': 'date',
        'customerId': 'customer_id',
        'productId': 'product_id',
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ('quantity', 'tax', 'totalAmount')
    MONEY_FIELDS: ClassVar[Tuple[str, ...]] = ('tax', 'totalAmount')
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ('customerId', 'productId')


@dataclass
class Product(LedgerRecord):
    """A product line as extracted from an invoice."""
    id: str
    name: Optional[str] = None
    quantity: Optional[int] = None
    unit_price: Optional[float] = None
    tax: Optional[float] = None
    price_with_tax: Optional[float] = None
    discount: Optional[float] = None
    missing_fields: Optional[List[str]] = None

    KIND: ClassVar[EntityKind] = EntityKind.PRODUCT
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'name': 'name',
        'quantity': 'quantity',
        'unitPrice': 'unit_price',
        'tax': 'tax',
        'priceWithTax': 'price_with_tax',
        'discount': 'discount',
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = (
        'quantity', 'unitPrice', 'tax', 'priceWithTax', 'discount'
    )
    MONEY_FIELDS: ClassVar[Tuple[str, ...]] = ('unitPrice', 'tax', 'priceWithTax', 'discount')
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ('discount',)


@dataclass
class Customer(LedgerRecord):
    """
    A customer. total_purchase_amount is maintained from the invoices
    that carry the customer's name, it is not authoritative on its own.
    """
    id: str
    name: Optional[str] = None
    phone_number: Optional[str] = None
    total_purchase_amount: Optional[float] = None
    email: Optional[str] = None
    address: Optional[str] = None
    missing_fields: Optional[List[str]] = None

    KIND: ClassVar[EntityKind] = EntityKind.CUSTOMER
    WIRE_FIELDS: ClassVar[Dict[str, str]] = {
        'name': 'name',
        'phoneNumber': 'phone_number',
        'totalPurchaseAmount': 'total_purchase_amount',
        'email': 'email',
        'address': 'address',
    }
    NUMERIC_FIELDS: ClassVar[Tuple[str, ...]] = ('totalPurchaseAmount',)
    MONEY_FIELDS: ClassVar[Tuple[str, ...]] = ('totalPurchaseAmount',)
    OPTIONAL_FIELDS: ClassVar[Tuple[str, ...]] = ('email', 'address')


RECORD_TYPES: Dict[EntityKind, Type[LedgerRecord]] = {
    EntityKind.INVOICE: Invoice,
    EntityKind.PRODUCT: Product,
    EntityKind.CUSTOMER: Customer,
}


def record_type(kind: EntityKind) -> Type[LedgerRecord]:
    """Return the record class for an entity kind."""
    return RECORD_TYPES[EntityKind(kind)]
