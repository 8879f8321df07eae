"""
Ledger Store Module.

This module holds the in-memory record collections:
    - Invoice, Product and Customer record models
    - EntityCollection: ordered, id-keyed collection with no-op misses
    - LedgerState: the container shared by ingestion, views and propagation

Author: ML Engineering Team
"""

from .models import EntityKind, LedgerRecord, Invoice, Product, Customer, record_type
from .collection import EntityCollection
from .state import LedgerState

__all__ = [
    'EntityKind',
    'LedgerRecord',
    'Invoice',
    'Product',
    'Customer',
    'record_type',
    'EntityCollection',
    'LedgerState'
]
