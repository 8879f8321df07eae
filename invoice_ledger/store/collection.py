"""
Entity Collections Module.

An EntityCollection is an ordered list of records of one kind, keyed by
record id. It has no error conditions: updating or deleting an id that
is not present does nothing. Records can disappear between the moment a
view is derived and the moment an edit based on that view is applied,
and such edits are expected to degrade to no-ops.

Author: ML Engineering Team
"""

from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from invoice_ledger.utils.logger import get_logger
from .models import EntityKind, LedgerRecord

# Initialize module logger
logger = get_logger(__name__)

T = TypeVar("T", bound=LedgerRecord)


class EntityCollection(Generic[T]):
    """
    Ordered, id-keyed collection of ledger records.

    Attributes:
        kind: EntityKind of the records held.

    Example:
        >>> invoices = EntityCollection(EntityKind.INVOICE)
        >>> invoices.add_many([Invoice(id="inv-1", serial_number="S1")])
        >>> invoices.update(Invoice(id="missing"))   # silently ignored
        False
        >>> len(invoices)
        1
    """

    def __init__(self, kind: EntityKind, records: Optional[Iterable[T]] = None) -> None:
        self.kind = EntityKind(kind)
        self._records: List[T] = list(records or [])

    def add_many(self, records: Iterable[T]) -> int:
        """
        Append records, preserving their order.

        Ids are trusted to be unique; no check is made.

        Returns:
            Number of records appended.
        """
        records = list(records)
        self._records.extend(records)
        logger.debug(f"Added {len(records)} {self.kind.value} record(s)")
        return len(records)

    def update(self, record: T) -> bool:
        """
        Replace the record that has the same id.

        Returns:
            True if a record was replaced, False if no record has that id.
        """
        index = self._index_of(record.id)
        if index is None:
            logger.debug(f"Update ignored, no {self.kind.value} with id {record.id}")
            return False
        self._records[index] = record
        return True

    def delete(self, record_id: str) -> bool:
        """
        Remove the record with the given id.

        Returns:
            True if a record was removed, False if none matched.
        """
        index = self._index_of(record_id)
        if index is None:
            logger.debug(f"Delete ignored, no {self.kind.value} with id {record_id}")
            return False
        del self._records[index]
        return True

    def clear(self) -> None:
        """Remove every record."""
        self._records = []

    def get(self, record_id: str) -> Optional[T]:
        """Return the record with the given id, or None."""
        index = self._index_of(record_id)
        return None if index is None else self._records[index]

    def find(self, predicate: Callable[[T], bool]) -> List[T]:
        """Return the records matching a predicate, in collection order."""
        return [record for record in self._records if predicate(record)]

    def find_by(self, attr: str, value: Any) -> List[T]:
        """Return the records whose attribute equals value (exact match)."""
        return [record for record in self._records if getattr(record, attr) == value]

    def all(self) -> List[T]:
        """Return a shallow copy of the records in collection order."""
        return list(self._records)

    def ids(self) -> List[str]:
        """Return record ids in collection order."""
        return [record.id for record in self._records]

    def _index_of(self, record_id: str) -> Optional[int]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return self._index_of(record_id) is not None

    def __repr__(self) -> str:
        return f"EntityCollection(kind='{self.kind.value}', records={len(self._records)})"
