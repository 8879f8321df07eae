"""
Spreadsheet Parser Module.

Flattens tabular documents into plain text for the extraction service,
which reads spreadsheet content as text rather than as a file:

    Sheet: Sales
    Serial No | Customer | Product | Qty | Total
    INV-1 | Bob | Widget | 2 | 236

Supported formats:
    - .xlsx via openpyxl
    - .xls (legacy Excel) via xlrd
    - .csv via the csv module

Author: ML Engineering Team
"""

import csv
import io
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import openpyxl
import xlrd

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class SpreadsheetParser:
    """
    Converts xlsx, xls and csv content to text, one line per row.

    Attributes:
        cell_separator: Text placed between cells of a row
        skip_empty_rows: Whether rows without any value are dropped

    Example:
        >>> parser = SpreadsheetParser()
        >>> text, metadata = parser.parse(xlsx_bytes, "sales.xlsx", ".xlsx")
    """

    CSV_ENCODINGS = ('utf-8-sig', 'cp1252', 'latin-1')

    def __init__(self) -> None:
        self.cell_separator = get_config("input.spreadsheet.cell_separator", " | ")
        self.skip_empty_rows = get_config("input.spreadsheet.skip_empty_rows", True)

    def parse(self, data: bytes, filename: str, extension: str) -> Tuple[str, Dict[str, Any]]:
        """
        Flatten a spreadsheet to text.

        Args:
            data: Raw file bytes.
            filename: Original filename, for messages and metadata.
            extension: One of '.xlsx', '.xls', '.csv'.

        Returns:
            Tuple of (text, metadata dictionary).

        Raises:
            CorruptedFileError: If the content cannot be read.
        """
        logger.info(f"Parsing spreadsheet: {filename}")

        try:
            if extension == '.csv':
                sheets = [("", self._read_csv(data))]
            elif extension == '.xls':
                sheets = self._read_xls(data)
            else:
                sheets = self._read_xlsx(data)
        except CorruptedFileError:
            raise
        except Exception as e:
            logger.error(f"Failed to read spreadsheet {filename}: {e}")
            raise CorruptedFileError(filename, str(e))

        lines: List[str] = []
        row_count = 0
        for sheet_name, rows in sheets:
            sheet_lines = self._format_rows(rows)
            if not sheet_lines:
                continue
            if sheet_name:
                if lines:
                    lines.append("")
                lines.append(f"Sheet: {sheet_name}")
            lines.extend(sheet_lines)
            row_count += len(sheet_lines)

        if row_count == 0:
            raise CorruptedFileError(filename, "Spreadsheet contains no data")

        metadata = {
            'original_filename': filename,
            'file_size_bytes': len(data),
            'file_type': 'csv' if extension == '.csv' else 'spreadsheet',
            'sheet_count': len(sheets),
            'row_count': row_count,
        }
        logger.info(f"Flattened {filename}: {len(sheets)} sheet(s), {row_count} row(s)")
        return "\n".join(lines), metadata

    def _read_xlsx(self, data: bytes) -> List[Tuple[str, List[Sequence[Any]]]]:
        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            return [
                (sheet.title, list(sheet.iter_rows(values_only=True)))
                for sheet in workbook.worksheets
            ]
        finally:
            workbook.close()

    def _read_xls(self, data: bytes) -> List[Tuple[str, List[Sequence[Any]]]]:
        workbook = xlrd.open_workbook(file_contents=data)
        sheets = []
        for sheet in workbook.sheets():
            rows = []
            for row_idx in range(sheet.nrows):
                row = []
                for cell in sheet.row(row_idx):
                    if cell.ctype == xlrd.XL_CELL_DATE:
                        row.append(xlrd.xldate.xldate_as_datetime(cell.value, workbook.datemode))
                    else:
                        row.append(cell.value)
                rows.append(row)
            sheets.append((sheet.name, rows))
        return sheets

    def _read_csv(self, data: bytes) -> List[List[str]]:
        for encoding in self.CSV_ENCODINGS:
            try:
                text = data.decode(encoding)
                break
            except UnicodeDecodeError:
                continue
        return list(csv.reader(io.StringIO(text, newline='')))

    def _format_rows(self, rows: Iterable[Sequence[Any]]) -> List[str]:
        lines = []
        for row in rows:
            cells = [self._format_cell(value) for value in row]
            # trailing empty cells carry no information
            while cells and not cells[-1]:
                cells.pop()
            if not cells and self.skip_empty_rows:
                continue
            lines.append(self.cell_separator.join(cells))
        return lines

    @staticmethod
    def _format_cell(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, datetime):
            if value.time() == datetime.min.time():
                return value.strftime("%Y-%m-%d")
            return value.isoformat(sep=' ')
        if isinstance(value, date):
            return value.strftime("%Y-%m-%d")
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()
