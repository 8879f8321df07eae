"""
Gemini Extractor Module.

This module provides the GeminiExtractor class that sends documents to a
Google Gemini model and parses the reply into ExtractedData.

Approach:
    One request per document. The fixed extraction prompt is sent together
    with either the raw document bytes (PDF, images) or the document
    flattened to text (spreadsheets, CSV). The model answers with a JSON
    object holding `invoices`, `products` and `customers` arrays.

API key resolution:
    1. Explicit api_key argument
    2. Environment variables listed in `extraction.api_key_env`
       (GEMINI_API_KEY, then GOOGLE_API_KEY)

    The placeholder value "your_api_key_here" counts as no key.

Author: ML Engineering Team
"""

import os
import time
from typing import Optional, Dict, Any, List

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import ExtractionUnavailableError, ExtractionRequestError
from .extraction_result import ExtractedData
from .prompts import EXTRACTION_PROMPT, TEXT_DOCUMENT_HEADER
from .response_parser import parse_response

# Initialize module logger
logger = get_logger(__name__)


class GeminiExtractor:
    """
    Gemini-based invoice, product and customer extractor.

    The extractor is usable only after a model has been configured, either
    at construction (an API key was found) or through initialize(). Calls
    made before that raise ExtractionUnavailableError.

    Attributes:
        model_name: Gemini model identifier
        temperature: Generation temperature
        model: genai.GenerativeModel instance, or None when unconfigured

    Example:
        >>> extractor = GeminiExtractor()
        >>> extractor.initialize("my-key")
        >>> data = extractor.extract_from_document(pdf_bytes, "application/pdf")
        >>> print(data.counts)
    """

    DEFAULT_MODEL = "gemini-2.5-flash"
    DEFAULT_KEY_ENV = ["GEMINI_API_KEY", "GOOGLE_API_KEY"]
    PLACEHOLDER_KEY = "your_api_key_here"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None
    ) -> None:
        """
        Initialize the extractor.

        Args:
            api_key: Gemini API key. If None, environment variables are tried.
            model_name: Model identifier. If None, uses config.
        """
        self.model_name = model_name or get_config("extraction.model_name", self.DEFAULT_MODEL)
        self.temperature = get_config("extraction.temperature", 0.0)
        self.model = None

        key = self._resolve_api_key(api_key)
        if key:
            self.initialize(key)
        else:
            logger.warning("No Gemini API key configured; extraction unavailable until initialize()")

    def _resolve_api_key(self, api_key: Optional[str]) -> Optional[str]:
        """Return the first usable key from the argument or the environment."""
        placeholder = get_config("extraction.placeholder_api_key", self.PLACEHOLDER_KEY)
        candidates = [api_key] + [
            os.getenv(name) for name in get_config("extraction.api_key_env", self.DEFAULT_KEY_ENV)
        ]
        for candidate in candidates:
            if candidate and candidate.strip() and candidate.strip() != placeholder:
                return candidate.strip()
        return None

    def initialize(self, api_key: str) -> None:
        """
        Configure the Gemini client with an API key.

        Args:
            api_key: Gemini API key.

        Raises:
            ExtractionUnavailableError: If the key is empty or the placeholder.
        """
        key = (api_key or "").strip()
        placeholder = get_config("extraction.placeholder_api_key", self.PLACEHOLDER_KEY)
        if not key or key == placeholder:
            raise ExtractionUnavailableError("A valid API key is required")

        genai.configure(api_key=key)
        self.model = genai.GenerativeModel(
            self.model_name,
            generation_config={
                "temperature": self.temperature
            }
        )
        logger.info(f"GeminiExtractor initialized with model: {self.model_name}")

    @property
    def is_available(self) -> bool:
        return self.model is not None

    def extract_from_document(
        self,
        data: bytes,
        mime_type: str,
        source_file: Optional[str] = None
    ) -> ExtractedData:
        """
        Extract records from a binary document.

        Args:
            data: Raw document bytes (PDF or image).
            mime_type: MIME type of the bytes, e.g. "application/pdf".
            source_file: Original filename for metadata.

        Returns:
            ExtractedData with the raw records.

        Raises:
            ExtractionUnavailableError: If no model is configured.
            ExtractionRequestError: If the service call fails.
            UnparsableResponseError: If the reply is not valid JSON.
        """
        contents = [EXTRACTION_PROMPT, {"mime_type": mime_type, "data": data}]
        return self._extract(contents, source_file or mime_type)

    def extract_from_text(
        self,
        text: str,
        source_file: Optional[str] = None
    ) -> ExtractedData:
        """
        Extract records from a document flattened to text.

        Args:
            text: Document content, e.g. spreadsheet rows joined by newlines.
            source_file: Original filename for metadata.

        Returns:
            ExtractedData with the raw records.
        """
        contents = [EXTRACTION_PROMPT, TEXT_DOCUMENT_HEADER + text]
        return self._extract(contents, source_file or "text document")

    def _extract(self, contents: List[Any], source: str) -> ExtractedData:
        if self.model is None:
            raise ExtractionUnavailableError("Gemini API key not configured")

        start_time = time.time()
        logger.info(f"Sending {source} to {self.model_name}")

        try:
            response = self.model.generate_content(contents)
            text = response.text
        except google_exceptions.GoogleAPIError as e:
            logger.error(f"Gemini request failed for {source}: {e}")
            raise ExtractionRequestError(source, str(e))
        except ValueError as e:
            # response.text raises ValueError when the reply was blocked
            logger.error(f"Gemini returned no text for {source}: {e}")
            raise ExtractionRequestError(source, str(e))

        result = parse_response(text)
        result.source_file = source
        result.model_name = self.model_name
        result.processing_time = time.time() - start_time

        counts = result.counts
        logger.info(
            f"Extraction complete: {counts['invoices']} invoices, "
            f"{counts['products']} products, {counts['customers']} customers, "
            f"time: {result.processing_time:.2f}s"
        )
        return result

    def get_model_info(self) -> Dict[str, Any]:
        return {
            'model_name': self.model_name,
            'temperature': self.temperature,
            'available': self.is_available,
        }

    def __repr__(self) -> str:
        return f"GeminiExtractor(model={self.model_name}, available={self.is_available})"
