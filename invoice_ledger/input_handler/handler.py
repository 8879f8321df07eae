"""
Main Input Handler Module.

This module provides the InputHandler class, the single entry point for
turning an uploaded file into something the extraction service accepts.
It detects the content kind and delegates to the matching processor:

    pdf          -> PDFProcessor        (bytes sent inline)
    image        -> ImageProcessor      (bytes sent inline)
    spreadsheet  -> SpreadsheetParser   (flattened to text)
    csv          -> SpreadsheetParser   (flattened to text)

Unsupported files raise UnsupportedFormatError before any service call.

Usage:
    from invoice_ledger.input_handler import InputHandler

    handler = InputHandler()
    document = handler.load("invoice.pdf")

    # Collect files from directories
    paths = handler.collect_files(["./invoices/"])

Classes:
    InputDocument: Prepared document ready for extraction
    InputHandler: Main class for file input handling
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union, List, Optional, Dict, Any, Iterable

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.helpers import get_file_extension
from invoice_ledger.utils.exceptions import (
    InputError,
    UnsupportedFormatError,
    InputFileNotFoundError,
    CorruptedFileError
)

from .pdf_processor import PDFProcessor
from .image_processor import ImageProcessor
from .spreadsheet_parser import SpreadsheetParser


# Initialize module logger
logger = get_logger(__name__)


@dataclass
class InputDocument:
    """
    A document prepared for extraction.

    Binary kinds (pdf, image) carry `data`; tabular kinds (spreadsheet,
    csv) carry `text`.

    Attributes:
        filename: Original filename
        content_kind: 'pdf', 'image', 'spreadsheet' or 'csv'
        mime_type: MIME type of the original or re-encoded content
        data: Bytes to send inline, for binary kinds
        text: Flattened content, for tabular kinds
        metadata: Additional file metadata
    """
    filename: str
    content_kind: str
    mime_type: str
    data: Optional[bytes] = None
    text: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_text(self) -> bool:
        return self.text is not None

    def __repr__(self) -> str:
        return (
            f"InputDocument(filename='{self.filename}', "
            f"kind='{self.content_kind}', "
            f"mime_type='{self.mime_type}')"
        )


class InputHandler:
    """
    Main input handler for invoice documents.

    Attributes:
        supported_extensions: Set of supported file extensions
        pdf_processor: PDFProcessor instance for PDF files
        image_processor: ImageProcessor instance for image files
        spreadsheet_parser: SpreadsheetParser for xlsx, xls and csv files

    Example:
        >>> handler = InputHandler()
        >>> document = handler.load("invoice.pdf")
        >>> document.content_kind
        'pdf'

        >>> document = handler.load_bytes(raw, "sales.csv")
        >>> print(document.text)
    """

    # Extension -> (content kind, MIME type)
    EXTENSION_KINDS = {
        '.pdf': ('pdf', 'application/pdf'),
        '.png': ('image', 'image/png'),
        '.jpg': ('image', 'image/jpeg'),
        '.jpeg': ('image', 'image/jpeg'),
        '.webp': ('image', 'image/webp'),
        '.xlsx': ('spreadsheet', 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'),
        '.xls': ('spreadsheet', 'application/vnd.ms-excel'),
        '.csv': ('csv', 'text/csv'),
    }

    # MIME type -> extension used for parsing
    MIME_EXTENSIONS = {
        'application/pdf': '.pdf',
        'image/png': '.png',
        'image/jpeg': '.jpg',
        'image/webp': '.webp',
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet': '.xlsx',
        'application/vnd.ms-excel': '.xls',
        'text/csv': '.csv',
    }

    def __init__(self) -> None:
        """Initialize the InputHandler and its processors."""
        configured = get_config("input.supported_extensions", list(self.EXTENSION_KINDS))

        # Only extensions a processor exists for can be enabled
        self.supported_extensions = {
            ext.lower() for ext in configured if ext.lower() in self.EXTENSION_KINDS
        }

        self.pdf_processor = PDFProcessor()
        self.image_processor = ImageProcessor()
        self.spreadsheet_parser = SpreadsheetParser()

        logger.info(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")

    def detect_content_kind(self, filename: str, mime_type: Optional[str] = None) -> str:
        """
        Detect the content kind of a file.

        An explicit MIME type takes precedence over the extension.

        Returns:
            The supported extension that identifies the kind.

        Raises:
            UnsupportedFormatError: If the kind is not supported.
        """
        if mime_type:
            extension = self.MIME_EXTENSIONS.get(mime_type.split(';')[0].strip().lower())
            if extension is None:
                if not mime_type.startswith('image/'):
                    raise UnsupportedFormatError(mime_type, sorted(self.supported_extensions))
                extension = get_file_extension(filename)
        else:
            extension = get_file_extension(filename)

        if extension not in self.supported_extensions:
            raise UnsupportedFormatError(extension or filename, sorted(self.supported_extensions))

        logger.debug(f"Detected {self.EXTENSION_KINDS[extension][0]} content: {filename}")
        return extension

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is supported and is not empty.

        Raises:
            InputFileNotFoundError: If file doesn't exist.
            UnsupportedFormatError: If file type is not supported.
            CorruptedFileError: If the file is empty.
        """
        path = Path(filepath)

        if not path.exists():
            raise InputFileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        self.detect_content_kind(path.name)

        if path.stat().st_size == 0:
            raise CorruptedFileError(str(filepath), "File is empty")

        logger.debug(f"File validated: {filepath}")
        return path

    def load(self, filepath: Union[str, Path]) -> InputDocument:
        """
        Load a file from disk and prepare it for extraction.

        Args:
            filepath: Path to the document.

        Returns:
            InputDocument ready for the extractor.

        Example:
            >>> document = handler.load("invoice.jpg")
            >>> document.mime_type
            'image/jpeg'
        """
        logger.info(f"Loading file: {filepath}")
        path = self.validate_file(filepath)

        try:
            data = path.read_bytes()
        except OSError as e:
            raise CorruptedFileError(str(filepath), str(e))

        return self.load_bytes(data, path.name)

    def load_bytes(
        self,
        data: bytes,
        filename: str,
        mime_type: Optional[str] = None
    ) -> InputDocument:
        """
        Prepare in-memory content for extraction.

        Args:
            data: Raw file bytes.
            filename: Original filename.
            mime_type: Optional MIME type, preferred over the extension.

        Raises:
            UnsupportedFormatError: If the content kind is not supported.
            CorruptedFileError: If the content is empty or unreadable.
        """
        extension = self.detect_content_kind(filename, mime_type)
        content_kind, default_mime = self.EXTENSION_KINDS[extension]

        if not data:
            raise CorruptedFileError(filename, "File is empty")

        if content_kind == 'pdf':
            data, metadata = self.pdf_processor.process(data, filename)
            document = InputDocument(filename, content_kind, default_mime, data=data, metadata=metadata)
        elif content_kind == 'image':
            data, image_mime, metadata = self.image_processor.process(data, filename)
            document = InputDocument(filename, content_kind, image_mime, data=data, metadata=metadata)
        else:
            text, metadata = self.spreadsheet_parser.parse(data, filename, extension)
            document = InputDocument(filename, content_kind, default_mime, text=text, metadata=metadata)

        logger.info(f"Prepared {document}")
        return document

    def collect_files(
        self,
        paths: Iterable[Union[str, Path]],
        recursive: bool = False
    ) -> List[Path]:
        """
        Expand files and directories into the list of files to process.

        Files are kept as given (unsupported ones fail later, per file).
        Directories contribute their supported files, sorted by name.

        Raises:
            InputFileNotFoundError: If a path does not exist.
        """
        collected: List[Path] = []

        for entry in paths:
            path = Path(entry)
            if not path.exists():
                raise InputFileNotFoundError(str(path))

            if path.is_file():
                collected.append(path)
                continue

            pattern = "**/*" if recursive else "*"
            found = sorted(
                p for p in path.glob(pattern)
                if p.is_file() and get_file_extension(p) in self.supported_extensions
            )
            logger.info(f"Found {len(found)} files to process in {path}")
            collected.extend(found)

        return collected
