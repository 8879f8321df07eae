"""
Excel Exporter Module.

This module provides Excel file generation for ledger exports. Uses
openpyxl for modern Excel format support.

Features:
    - Formatted headers
    - Two-decimal number format on monetary columns
    - Auto-column width
    - Frozen header row

Author: ML Engineering Team
"""

from pathlib import Path
from typing import List, Optional, Sequence

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.helpers import ensure_directory, generate_timestamp
from invoice_ledger.utils.exceptions import ExcelExportError
from invoice_ledger.store.models import EntityKind, LedgerRecord, record_type
from .records import export_columns, export_rows

# Initialize module logger
logger = get_logger(__name__)


class ExcelExporter:
    """
    Exports ledger records to Excel format.

    One sheet per export, named after the collection. Monetary cells stay
    numeric and are displayed with two decimals.

    Attributes:
        output_dir: Directory for output files
        money_decimals: Decimals shown on monetary columns

    Example:
        >>> exporter = ExcelExporter()
        >>> filepath = exporter.export(state.invoices.all(), EntityKind.INVOICE)
        >>> print(f"Saved to: {filepath}")
    """

    SHEET_NAMES = {
        EntityKind.INVOICE: "Invoices",
        EntityKind.PRODUCT: "Products",
        EntityKind.CUSTOMER: "Customers",
    }

    def __init__(self) -> None:
        """Initialize the Excel exporter with configuration."""
        self.output_dir = Path(get_config("paths.output_dir", "outputs"))
        self.money_decimals = get_config("output.money_decimals", 2)

        logger.debug(f"ExcelExporter initialized (output_dir: {self.output_dir})")

    def export(
        self,
        records: Sequence[LedgerRecord],
        kind: EntityKind,
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export records to an Excel file.

        Args:
            records: Records to export, in output order.
            kind: Entity kind of the records.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If export fails.
        """
        kind = EntityKind(kind)
        out_dir = Path(output_dir) if output_dir else self.output_dir
        ensure_directory(out_dir)

        filepath = out_dir / (filename or self.get_default_filename(kind))

        try:
            workbook = openpyxl.Workbook()
            self._create_data_sheet(workbook, records, kind)
            workbook.save(filepath)

            logger.info(f"Excel file saved: {filepath} ({len(records)} records)")
            return str(filepath)

        except Exception as e:
            logger.error(f"Excel export failed: {e}")
            raise ExcelExportError(str(filepath), str(e))

    def _create_data_sheet(
        self,
        workbook,
        records: Sequence[LedgerRecord],
        kind: EntityKind
    ) -> None:
        """
        Fill the workbook's active sheet with one row per record.

        Args:
            workbook: openpyxl Workbook instance.
            records: Records to write.
            kind: Entity kind of the records.
        """
        sheet = workbook.active
        sheet.title = get_config(f"output.excel.sheet_names.{kind.value}", self.SHEET_NAMES[kind])

        columns = export_columns(kind)
        money_columns = set(record_type(kind).MONEY_FIELDS)
        money_format = "0." + "0" * self.money_decimals if self.money_decimals else "0"

        # Define styles
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        # Write headers
        for col, header_name in enumerate(columns, 1):
            cell = sheet.cell(row=1, column=col, value=header_name)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = thin_border

        # Write data rows
        for row_num, row in enumerate(export_rows(records, kind), 2):
            for col, column in enumerate(columns, 1):
                value = row[column]
                cell = sheet.cell(row=row_num, column=col, value=value)
                cell.border = thin_border
                if column in money_columns and isinstance(value, (int, float)):
                    cell.number_format = money_format

        self._adjust_widths(sheet, columns, len(records))

        # Freeze header row
        sheet.freeze_panes = 'A2'

    @staticmethod
    def _adjust_widths(sheet, columns: List[str], row_count: int) -> None:
        for col, header_name in enumerate(columns, 1):
            max_length = len(header_name)
            for row in range(2, row_count + 2):
                cell_value = sheet.cell(row=row, column=col).value
                if cell_value is not None:
                    max_length = max(max_length, len(str(cell_value)))

            sheet.column_dimensions[get_column_letter(col)].width = min(max_length + 2, 50)

    def get_default_filename(self, kind: EntityKind) -> str:
        """
        Generate a default filename with timestamp.

        Example:
            >>> exporter.get_default_filename(EntityKind.INVOICE)
            'invoices_20261019_101500.xlsx'
        """
        pattern = get_config("output.excel.filename_pattern", "{kind}_{timestamp}.xlsx")
        return pattern.format(kind=f"{EntityKind(kind).value}s", timestamp=generate_timestamp())
