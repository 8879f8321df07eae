"""
Custom Exceptions Module.

This module defines the exceptions raised by the invoice ledger. Failures
are always scoped to a single operation (one file, one export); there is
no fatal error class.

Exception Hierarchy:
    InvoiceLedgerError (base)
    ├── InputError
    │   ├── UnsupportedFormatError
    │   ├── InputFileNotFoundError
    │   └── CorruptedFileError
    ├── ExtractionError
    │   ├── ExtractionUnavailableError
    │   ├── ExtractionRequestError
    │   └── UnparsableResponseError
    └── OutputError
        ├── ExcelExportError
        ├── CsvExportError
        └── SnapshotError

Update and delete of an unknown record id is deliberately NOT an error;
the entity collections treat it as a no-op.
"""


class InvoiceLedgerError(Exception):
    """
    Base exception for all invoice ledger errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceLedgerError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFormatError(InputError):
    """
    Raised when a file's content kind is not one the extractor accepts.

    Always raised before the extraction service is contacted.

    Example:
        >>> raise UnsupportedFormatError(".docx", [".pdf", ".png"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file format: '{file_type}'"
        details = {"file_type": file_type, "supported_types": sorted(supported_types)}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when an input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when a file appears to be corrupted or unreadable."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# EXTRACTION ERRORS
# =============================================================================

class ExtractionError(InvoiceLedgerError):
    """Base exception for extraction service errors."""
    pass


class ExtractionUnavailableError(ExtractionError):
    """Raised when the extraction service has not been initialized."""

    def __init__(self, reason: str = None):
        message = "Extraction service not initialized"
        details = {"reason": reason}
        super().__init__(message, details)


class ExtractionRequestError(ExtractionError):
    """Raised when the call to the extraction service itself fails."""

    def __init__(self, source: str, reason: str = None):
        message = f"Extraction request failed for: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


class UnparsableResponseError(ExtractionError):
    """
    Raised when the service reply is not valid JSON after fence stripping.

    The offending text is kept on `raw_text` for diagnostics.
    """

    def __init__(self, raw_text: str, reason: str = None):
        self.raw_text = raw_text
        message = "Failed to parse extraction response"
        details = {"reason": reason, "response_length": len(raw_text or "")}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceLedgerError):
    """Base exception for output handling errors."""
    pass


class ExcelExportError(OutputError):
    """Raised when Excel export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export Excel file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class CsvExportError(OutputError):
    """Raised when CSV export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export CSV file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class SnapshotError(OutputError):
    """Raised when a ledger snapshot cannot be written or read."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Snapshot operation failed: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'InvoiceLedgerError',
    'InputError',
    'UnsupportedFormatError',
    'InputFileNotFoundError',
    'CorruptedFileError',
    'ExtractionError',
    'ExtractionUnavailableError',
    'ExtractionRequestError',
    'UnparsableResponseError',
    'OutputError',
    'ExcelExportError',
    'CsvExportError',
    'SnapshotError',
]
