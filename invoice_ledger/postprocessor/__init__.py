"""
Post-Processing Module for the Invoice Ledger.

This module provides functionality for:
    - Missing-field computation for invoices, products and customers
    - Date and amount normalization
    - Cleaning raw extracted records before ingestion

Author: ML Engineering Team
"""

from .processor import RecordNormalizer
from .validators import REQUIRED_FIELDS, compute_missing, with_missing_fields
from .normalizers import DateNormalizer, AmountNormalizer, QuantityNormalizer

__all__ = [
    'RecordNormalizer',
    'REQUIRED_FIELDS',
    'compute_missing',
    'with_missing_fields',
    'DateNormalizer',
    'AmountNormalizer',
    'QuantityNormalizer'
]
