"""
Output Handler Module for Invoice Ledger.

This module exports ledger collections:
    - Excel export (.xlsx) with formatted headers
    - CSV export
    - Selection-aware export (grouped invoices expand to line items)

Author: ML Engineering Team
"""

from .handler import OutputHandler
from .excel_exporter import ExcelExporter
from .csv_exporter import CsvExporter
from .records import export_columns, export_rows

__all__ = ['OutputHandler', 'ExcelExporter', 'CsvExporter', 'export_columns', 'export_rows']
