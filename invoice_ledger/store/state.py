"""
Ledger State Module.

LedgerState is the session-scoped container holding the three entity
collections. It is created empty and passed by reference to everything
that reads or mutates the ledger (ingestion, propagation, views, export).

All mutation entry points and every grouping snapshot take `state.lock`,
a single re-entrant lock covering all three collections, so a reader
never observes a partially propagated edit.

Persistence is optional and layered on top: to_dict()/from_dict() and
save_snapshot()/load_snapshot() round-trip the container through JSON.

Author: ML Engineering Team
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, Union

from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.helpers import ensure_directory
from invoice_ledger.utils.exceptions import SnapshotError
from .collection import EntityCollection
from .models import Customer, EntityKind, Invoice, Product

# Initialize module logger
logger = get_logger(__name__)

SNAPSHOT_VERSION = 1


class LedgerState:
    """
    Container for the invoice, product and customer collections.

    Attributes:
        invoices: Flat invoice line items.
        products: Products.
        customers: Customers.
        lock: Re-entrant lock serializing every mutation and snapshot.

    Example:
        >>> state = LedgerState()
        >>> state.invoices.add_many([Invoice(id="inv-1", serial_number="S1")])
        >>> state.counts()
        {'invoices': 1, 'products': 0, 'customers': 0}
    """

    def __init__(self) -> None:
        self.invoices: EntityCollection[Invoice] = EntityCollection(EntityKind.INVOICE)
        self.products: EntityCollection[Product] = EntityCollection(EntityKind.PRODUCT)
        self.customers: EntityCollection[Customer] = EntityCollection(EntityKind.CUSTOMER)
        self.lock = threading.RLock()

    def collection(self, kind: EntityKind) -> EntityCollection:
        """Return the collection holding records of the given kind."""
        kind = EntityKind(kind)
        if kind is EntityKind.INVOICE:
            return self.invoices
        if kind is EntityKind.PRODUCT:
            return self.products
        return self.customers

    def clear(self) -> None:
        """Empty all three collections."""
        with self.lock:
            self.invoices.clear()
            self.products.clear()
            self.customers.clear()
        logger.info("Ledger cleared")

    def counts(self) -> Dict[str, int]:
        """Return the number of records per collection."""
        with self.lock:
            return {
                'invoices': len(self.invoices),
                'products': len(self.products),
                'customers': len(self.customers),
            }

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the whole ledger to wire-format dictionaries.

        Returns:
            {'version': 1, 'invoices': [...], 'products': [...], 'customers': [...]}
        """
        with self.lock:
            return {
                'version': SNAPSHOT_VERSION,
                'invoices': [record.to_dict() for record in self.invoices],
                'products': [record.to_dict() for record in self.products],
                'customers': [record.to_dict() for record in self.customers],
            }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LedgerState':
        """
        Rebuild a ledger from to_dict() output.

        Records keep their stored ids and missing-field markers.
        """
        state = cls()
        state.invoices.add_many(Invoice.from_dict(item) for item in data.get('invoices', []))
        state.products.add_many(Product.from_dict(item) for item in data.get('products', []))
        state.customers.add_many(Customer.from_dict(item) for item in data.get('customers', []))
        return state

    def save_snapshot(self, filepath: Union[str, Path]) -> str:
        """
        Write the ledger to a JSON file.

        Raises:
            SnapshotError: If the file cannot be written.
        """
        path = Path(filepath)
        try:
            ensure_directory(path.parent)
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding='utf-8')
        except OSError as e:
            raise SnapshotError(str(path), str(e))

        logger.info(f"Snapshot saved: {path} {self.counts()}")
        return str(path)

    @classmethod
    def load_snapshot(cls, filepath: Union[str, Path]) -> 'LedgerState':
        """
        Read a ledger from a JSON file written by save_snapshot().

        Raises:
            SnapshotError: If the file is missing or not valid JSON.
        """
        path = Path(filepath)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotError(str(path), str(e))

        if not isinstance(data, dict):
            raise SnapshotError(str(path), "Snapshot root is not an object")

        state = cls.from_dict(data)
        logger.info(f"Snapshot loaded: {path} {state.counts()}")
        return state

    def __repr__(self) -> str:
        counts = self.counts()
        return (
            f"LedgerState(invoices={counts['invoices']}, "
            f"products={counts['products']}, "
            f"customers={counts['customers']})"
        )
