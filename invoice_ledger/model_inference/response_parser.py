"""
Extraction Response Parser.

Turns the text reply of the extraction model into ExtractedData. The model
sometimes wraps its JSON in a fenced code block (```json ... ```); the
fence is stripped before parsing. Anything that is still not a JSON
object with array fields raises UnparsableResponseError carrying the raw
text, so no data is silently dropped.

Author: ML Engineering Team
"""

import json
import re

from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.exceptions import UnparsableResponseError
from .extraction_result import ExtractedData

# Initialize module logger
logger = get_logger(__name__)

RECORD_ARRAYS = ('invoices', 'products', 'customers')

_LEADING_FENCE = re.compile(r'^```[A-Za-z0-9_-]*[ \t]*\n?')
_TRAILING_FENCE = re.compile(r'\n?[ \t]*```$')


def strip_code_fence(text: str) -> str:
    """
    Remove a leading and trailing fenced-block marker.

    Example:
        >>> strip_code_fence('```json\\n{"invoices": []}\\n```')
        '{"invoices": []}'
    """
    stripped = (text or "").strip()
    if stripped.startswith("```"):
        stripped = _LEADING_FENCE.sub('', stripped, count=1)
        stripped = _TRAILING_FENCE.sub('', stripped, count=1)
    return stripped.strip()


def parse_response(text: str) -> ExtractedData:
    """
    Parse the model reply into ExtractedData.

    Missing arrays are treated as empty.

    Raises:
        UnparsableResponseError: If the text is not a JSON object, or one of
            the record fields is not an array.
    """
    json_text = strip_code_fence(text)

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse extraction response: {e}")
        logger.debug(f"Response text: {text}")
        raise UnparsableResponseError(text, str(e))

    if not isinstance(parsed, dict):
        raise UnparsableResponseError(text, f"Expected a JSON object, got {type(parsed).__name__}")

    arrays = {}
    for name in RECORD_ARRAYS:
        value = parsed.get(name) or []
        if not isinstance(value, list):
            raise UnparsableResponseError(text, f"Field '{name}' is not an array")
        arrays[name] = [item for item in value if isinstance(item, dict)]
        skipped = len(value) - len(arrays[name])
        if skipped:
            logger.warning(f"Skipped {skipped} non-object entries in '{name}'")

    return ExtractedData(**arrays)
