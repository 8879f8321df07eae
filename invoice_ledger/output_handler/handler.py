"""
Main Output Handler Module.

This module provides the unified OutputHandler class that exports the
ledger's collections to Excel or CSV, either whole or limited to the
rows selected in a table view.

Author: ML Engineering Team
"""

from typing import Dict, List, Optional, Sequence

from invoice_ledger.utils.logger import get_logger
from invoice_ledger.store.models import EntityKind, LedgerRecord
from invoice_ledger.store.state import LedgerState
from invoice_ledger.engine.grouping import group_by_serial
from .excel_exporter import ExcelExporter
from .csv_exporter import CsvExporter

# Initialize module logger
logger = get_logger(__name__)

EXPORT_FORMATS = ('xlsx', 'csv')


class OutputHandler:
    """
    Unified export entry point for a ledger.

    Invoices are exported flat: selecting a grouped invoice exports every
    line item of that group. Products and customers export the selected
    records. With no selection, the whole collection is exported.

    Attributes:
        state: LedgerState to export from
        excel_exporter: ExcelExporter instance
        csv_exporter: CsvExporter instance

    Example:
        >>> handler = OutputHandler(state)
        >>> handler.export(EntityKind.INVOICE, "xlsx", selected_ids=view.selection())
        >>> handler.export_all("csv")
    """

    def __init__(self, state: LedgerState) -> None:
        self.state = state

        # Initialize exporters (lazy loading)
        self._excel_exporter = None
        self._csv_exporter = None

        logger.info("OutputHandler initialized")

    @property
    def excel_exporter(self) -> ExcelExporter:
        """Get or create the Excel exporter."""
        if self._excel_exporter is None:
            self._excel_exporter = ExcelExporter()
        return self._excel_exporter

    @property
    def csv_exporter(self) -> CsvExporter:
        """Get or create the CSV exporter."""
        if self._csv_exporter is None:
            self._csv_exporter = CsvExporter()
        return self._csv_exporter

    def select_records(
        self,
        kind: EntityKind,
        selected_ids: Optional[Sequence[str]] = None
    ) -> List[LedgerRecord]:
        """
        Resolve a selection into the records to export, in collection order.

        Args:
            kind: Collection to export.
            selected_ids: Row ids selected in the table view. For invoices
                these are grouped-invoice ids. None or empty means all.

        Returns:
            Records to export.
        """
        kind = EntityKind(kind)

        with self.state.lock:
            records = self.state.collection(kind).all()

            if not selected_ids:
                return records

            wanted = set(selected_ids)
            if kind is EntityKind.INVOICE:
                wanted = {
                    invoice_id
                    for group in group_by_serial(records) if group.id in wanted
                    for invoice_id in group.invoice_ids
                }

        return [record for record in records if record.id in wanted]

    def export(
        self,
        kind: EntityKind,
        export_format: str = "xlsx",
        selected_ids: Optional[Sequence[str]] = None,
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export one collection.

        Args:
            kind: Collection to export.
            export_format: "xlsx" or "csv".
            selected_ids: Optional table-view selection.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the created file.

        Raises:
            ValueError: If the format is unknown.
            ExcelExportError / CsvExportError: If writing fails.
        """
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format: {export_format!r}")

        kind = EntityKind(kind)
        records = self.select_records(kind, selected_ids)
        logger.info(
            f"Exporting {len(records)} {kind.value} record(s) as {export_format}"
            + (" (selection)" if selected_ids else "")
        )

        exporter = self.excel_exporter if export_format == "xlsx" else self.csv_exporter
        return exporter.export(records, kind, filename, output_dir)

    def export_all(
        self,
        export_format: str = "xlsx",
        output_dir: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Export every collection to its own file.

        Returns:
            Mapping of entity kind value to file path.
        """
        return {
            kind.value: self.export(kind, export_format, output_dir=output_dir)
            for kind in EntityKind
        }
