"""
CSV Exporter Module.

Writes ledger records as delimited text, one header row followed by one
row per record. Monetary values are written with two decimals.

Author: ML Engineering Team
"""

import csv
from pathlib import Path
from typing import Optional, Sequence

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.helpers import ensure_directory, generate_timestamp
from invoice_ledger.utils.exceptions import CsvExportError
from invoice_ledger.store.models import EntityKind, LedgerRecord
from .records import export_columns, export_rows, format_cell

# Initialize module logger
logger = get_logger(__name__)


class CsvExporter:
    """
    Exports ledger records to CSV.

    Attributes:
        output_dir: Directory for output files
        delimiter: Field delimiter
        money_decimals: Decimals written for monetary values

    Example:
        >>> exporter = CsvExporter()
        >>> exporter.export(state.customers.all(), EntityKind.CUSTOMER)
        'outputs/customers_20261019_101500.csv'
    """

    def __init__(self) -> None:
        self.output_dir = Path(get_config("paths.output_dir", "outputs"))
        self.delimiter = get_config("output.csv.delimiter", ",")
        self.money_decimals = get_config("output.money_decimals", 2)

    def export(
        self,
        records: Sequence[LedgerRecord],
        kind: EntityKind,
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export records to a CSV file.

        Returns:
            Path to the created CSV file.

        Raises:
            CsvExportError: If the file cannot be written.
        """
        kind = EntityKind(kind)
        out_dir = Path(output_dir) if output_dir else self.output_dir
        ensure_directory(out_dir)

        filepath = out_dir / (filename or self.get_default_filename(kind))
        columns = export_columns(kind)

        try:
            with open(filepath, 'w', encoding='utf-8', newline='') as f:
                writer = csv.writer(f, delimiter=self.delimiter)
                writer.writerow(columns)
                for row in export_rows(records, kind):
                    writer.writerow([
                        format_cell(kind, column, row[column], self.money_decimals)
                        for column in columns
                    ])
        except OSError as e:
            logger.error(f"CSV export failed: {e}")
            raise CsvExportError(str(filepath), str(e))

        logger.info(f"CSV file saved: {filepath} ({len(records)} records)")
        return str(filepath)

    def get_default_filename(self, kind: EntityKind) -> str:
        pattern = get_config("output.csv.filename_pattern", "{kind}_{timestamp}.csv")
        return pattern.format(kind=f"{EntityKind(kind).value}s", timestamp=generate_timestamp())
