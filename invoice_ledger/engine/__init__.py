"""
Consistency Engine Module for the Invoice Ledger.

This module provides:
    - Grouping of flat invoice line items by serial number
    - Search, sort and selection state for the ledger tables
    - Propagation of edits across name-joined collections

Author: ML Engineering Team
"""

from .grouping import GroupedInvoice, group_by_serial, find_group
from .views import TableView, SortDirection
from .propagation import PropagationEngine, GroupEdit

__all__ = [
    'GroupedInvoice',
    'group_by_serial',
    'find_group',
    'TableView',
    'SortDirection',
    'PropagationEngine',
    'GroupEdit'
]
