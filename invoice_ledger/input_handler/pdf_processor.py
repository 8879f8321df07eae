"""
PDF Processor Module.

This module validates PDF documents before they are sent to the
extraction service:
    - Opening the document to reject corrupted files early
    - Page counting
    - Detecting whether the PDF carries a text layer
    - PDF metadata extraction

The PDF itself is passed to the model unchanged; the service reads both
digital and scanned PDFs.

Uses pdfplumber for PDF analysis.

Author: ML Engineering Team
"""

import io
from typing import Tuple, Dict, Any

import pdfplumber

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import CorruptedFileError

# Initialize module logger
logger = get_logger(__name__)


class PDFProcessor:
    """
    Processor for PDF files.

    Attributes:
        max_pages: Page count above which a warning is logged
        min_text_chars: Characters of text on the first page below which
            the PDF is treated as scanned

    Example:
        >>> processor = PDFProcessor()
        >>> data, metadata = processor.process(pdf_bytes, "invoice.pdf")
        >>> print(f"{metadata['page_count']} page(s)")
    """

    MIME_TYPE = "application/pdf"

    def __init__(self) -> None:
        """Initialize the PDF processor with configuration."""
        self.max_pages = get_config("input.pdf.max_pages", 50)
        self.min_text_chars = get_config("input.pdf.min_text_chars", 50)

        logger.debug(f"PDFProcessor initialized (max_pages={self.max_pages})")

    def process(self, data: bytes, filename: str) -> Tuple[bytes, Dict[str, Any]]:
        """
        Validate a PDF and collect its metadata.

        Args:
            data: Raw PDF bytes.
            filename: Original filename, for messages and metadata.

        Returns:
            Tuple of (unchanged PDF bytes, metadata dictionary).

        Raises:
            CorruptedFileError: If the PDF cannot be opened.
        """
        logger.info(f"Processing PDF: {filename}")

        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                metadata = self._extract_metadata(pdf, filename, len(data))
        except Exception as e:
            logger.error(f"Failed to open PDF {filename}: {e}")
            raise CorruptedFileError(filename, str(e))

        if metadata['page_count'] == 0:
            raise CorruptedFileError(filename, "PDF has no pages")

        if metadata['page_count'] > self.max_pages:
            logger.warning(
                f"PDF {filename} has {metadata['page_count']} pages, "
                f"extraction may be slow"
            )

        logger.info(
            f"Validated PDF: {metadata['page_count']} page(s), "
            f"{'scanned' if metadata['is_scanned'] else 'digital'}"
        )
        return data, metadata

    def _extract_metadata(self, pdf, filename: str, size: int) -> Dict[str, Any]:
        """
        Extract metadata from an open PDF.

        Args:
            pdf: Open pdfplumber document.
            filename: Original filename.
            size: Size of the document in bytes.

        Returns:
            Dictionary of metadata.
        """
        metadata = {
            'original_filename': filename,
            'file_size_bytes': size,
            'file_type': 'pdf',
            'page_count': len(pdf.pages),
            'is_scanned': self._is_scanned(pdf),
        }

        pdf_metadata = pdf.metadata or {}
        for key in ('Title', 'Author', 'Creator', 'CreationDate'):
            if pdf_metadata.get(key):
                metadata[f"pdf_{key.lower()}"] = str(pdf_metadata[key])

        return metadata

    def _is_scanned(self, pdf) -> bool:
        """
        Detect if a PDF is scanned (image-only) or digital (text-based).

        Only the first page is inspected.
        """
        if not pdf.pages:
            return True

        text = pdf.pages[0].extract_text() or ""
        return len(text.strip()) < self.min_text_chars
