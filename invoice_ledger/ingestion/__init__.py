"""
Ingestion Module for Invoice Ledger.

Moves extracted data into the ledger:
    - ExtractionIngestor: normalization, identities, missing fields
    - LedgerPipeline: sequential per-file processing with failure isolation

Author: ML Engineering Team
"""

from .ingestor import ExtractionIngestor
from .pipeline import FileOutcome, LedgerPipeline

__all__ = ['ExtractionIngestor', 'FileOutcome', 'LedgerPipeline']
