"""
Ledger Pipeline Module.

Runs uploaded documents through input handling, extraction and ingestion,
one file at a time. Each file is an independent unit: an error raised
while handling it is logged, recorded on that file's FileOutcome, and the
batch moves on to the next file.

Author: ML Engineering Team
"""

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import InvoiceLedgerError
from invoice_ledger.store.state import LedgerState
from invoice_ledger.input_handler.handler import InputDocument, InputHandler
from invoice_ledger.model_inference.extractor import GeminiExtractor
from invoice_ledger.model_inference.extraction_result import ExtractedData
from .ingestor import ExtractionIngestor

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class FileOutcome:
    """
    Result of processing one file.

    Attributes:
        filename: Name of the processed file
        success: Whether the file's records were added to the ledger
        counts: Records added per collection
        error: Error message when processing failed
        error_type: Exception class name when processing failed
        processing_time: Seconds spent on the file
    """
    filename: str
    success: bool
    counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None
    error_type: Optional[str] = None
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'success': self.success,
            'counts': dict(self.counts),
            'error': self.error,
            'error_type': self.error_type,
            'processing_time': self.processing_time,
        }


class LedgerPipeline:
    """
    Sequential document pipeline for one ledger session.

    Only one file is extracted at a time per pipeline. Concurrent callers
    wait for the file in progress to finish.

    Attributes:
        state: LedgerState receiving extracted records
        input_handler: Loads and prepares documents
        extractor: Extraction service client
        ingestor: Stores extracted records

    Example:
        >>> pipeline = LedgerPipeline(LedgerState(), extractor=GeminiExtractor("key"))
        >>> outcomes = pipeline.process_files(["a.pdf", "b.xlsx"])
        >>> pipeline.summarize(outcomes)
        {'files': 2, 'succeeded': 2, 'failed': 0, 'invoices': 5, ...}
    """

    def __init__(
        self,
        state: LedgerState,
        extractor: Optional[GeminiExtractor] = None,
        input_handler: Optional[InputHandler] = None,
        ingestor: Optional[ExtractionIngestor] = None
    ) -> None:
        self.state = state
        self.extractor = extractor or GeminiExtractor()
        self.input_handler = input_handler or InputHandler()
        self.ingestor = ingestor or ExtractionIngestor(state)
        self._session_lock = threading.Lock()

        logger.info("LedgerPipeline initialized")

    def extract(self, document: InputDocument) -> ExtractedData:
        """Send a prepared document to the extractor."""
        if document.is_text:
            return self.extractor.extract_from_text(document.text, source_file=document.filename)
        return self.extractor.extract_from_document(
            document.data, document.mime_type, source_file=document.filename
        )

    def process_file(self, filepath: Union[str, Path]) -> FileOutcome:
        """
        Load, extract and ingest one file from disk.

        Never raises for per-file failures; see FileOutcome.error.
        """
        filepath = Path(filepath)
        return self._run(filepath.name, lambda: self.input_handler.load(filepath))

    def process_bytes(
        self,
        data: bytes,
        filename: str,
        mime_type: Optional[str] = None
    ) -> FileOutcome:
        """Load, extract and ingest in-memory content, e.g. an upload."""
        return self._run(filename, lambda: self.input_handler.load_bytes(data, filename, mime_type))

    def process_files(self, filepaths: Iterable[Union[str, Path]]) -> List[FileOutcome]:
        """
        Process files strictly in order, one at a time.

        A failing file never stops the files after it.
        """
        filepaths = list(filepaths)
        outcomes = []

        for i, filepath in enumerate(filepaths, 1):
            logger.info(f"Processing file {i}/{len(filepaths)}: {Path(filepath).name}")
            outcomes.append(self.process_file(filepath))

        summary = self.summarize(outcomes)
        logger.info(
            f"Batch processing complete: {summary['succeeded']} successful, "
            f"{summary['failed']} failed; added {summary['invoices']} invoices, "
            f"{summary['products']} products, {summary['customers']} customers"
        )
        return outcomes

    @staticmethod
    def summarize(outcomes: List[FileOutcome]) -> Dict[str, int]:
        """Aggregate per-file outcomes into batch totals."""
        summary = {
            'files': len(outcomes),
            'succeeded': sum(1 for o in outcomes if o.success),
            'failed': sum(1 for o in outcomes if not o.success),
            'invoices': 0,
            'products': 0,
            'customers': 0,
        }
        for outcome in outcomes:
            for name, count in outcome.counts.items():
                summary[name] = summary.get(name, 0) + count
        return summary

    def _run(self, filename: str, load) -> FileOutcome:
        start_time = time.time()

        with self._session_lock:
            try:
                document = load()
                extracted = self.extract(document)
                counts = self.ingestor.ingest(extracted)

            except InvoiceLedgerError as e:
                logger.error(f"Error processing {filename}: {e}")
                return FileOutcome(
                    filename=filename,
                    success=False,
                    error=str(e),
                    error_type=type(e).__name__,
                    processing_time=time.time() - start_time
                )

            except Exception as e:
                logger.exception(f"Unexpected error processing {filename}: {e}")
                return FileOutcome(
                    filename=filename,
                    success=False,
                    error=f"Unexpected error: {e}",
                    error_type=type(e).__name__,
                    processing_time=time.time() - start_time
                )

        return FileOutcome(
            filename=filename,
            success=True,
            counts=counts,
            processing_time=time.time() - start_time
        )
