"""
Extraction Result Data Class.

This module defines the structured payload returned by the extraction
service: three lists of raw attribute bags (invoices, products,
customers) plus metadata about the call that produced them.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class ExtractedData:
    """
    Raw records extracted from one document.

    The records are unvalidated dictionaries keyed by wire names; the
    ingestion step normalizes them and assigns identities.

    Attributes:
        invoices: Raw invoice line items
        products: Raw products
        customers: Raw customers
        source_file: Name of the document the data came from
        model_name: Name of the model used
        processing_time: Seconds spent in the extraction call
        extraction_timestamp: When extraction was performed

    Example:
        >>> data = ExtractedData(invoices=[{"serialNumber": "S1"}])
        >>> data.counts
        {'invoices': 1, 'products': 0, 'customers': 0}
    """
    invoices: List[Dict[str, Any]] = field(default_factory=list)
    products: List[Dict[str, Any]] = field(default_factory=list)
    customers: List[Dict[str, Any]] = field(default_factory=list)

    source_file: Optional[str] = None
    model_name: Optional[str] = None
    processing_time: float = 0.0
    extraction_timestamp: Optional[str] = None

    def __post_init__(self):
        """Initialize timestamp if not provided."""
        if self.extraction_timestamp is None:
            self.extraction_timestamp = datetime.now().isoformat()

    @property
    def counts(self) -> Dict[str, int]:
        return {
            'invoices': len(self.invoices),
            'products': len(self.products),
            'customers': len(self.customers),
        }

    @property
    def is_empty(self) -> bool:
        return not (self.invoices or self.products or self.customers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'invoices': self.invoices,
            'products': self.products,
            'customers': self.customers,
            'source_file': self.source_file,
            'model_name': self.model_name,
            'processing_time': self.processing_time,
            'extraction_timestamp': self.extraction_timestamp,
        }

    def __repr__(self) -> str:
        counts = self.counts
        return (
            f"ExtractedData(source={self.source_file}, "
            f"invoices={counts['invoices']}, "
            f"products={counts['products']}, "
            f"customers={counts['customers']})"
        )
