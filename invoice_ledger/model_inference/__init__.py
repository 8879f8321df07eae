"""
Model Inference Module for Invoice Ledger.

This module talks to the Gemini extraction service and turns its replies
into raw invoice, product and customer records.

Features:
    - Gemini client configured from an API key or the environment
    - Inline document bytes (PDF, images) or flattened text input
    - Fixed extraction prompt with line-item, tax and discount rules
    - Tolerant JSON reply parsing (code fences stripped)

Author: ML Engineering Team
"""

from .extractor import GeminiExtractor
from .extraction_result import ExtractedData
from .response_parser import parse_response, strip_code_fence
from .prompts import EXTRACTION_PROMPT

__all__ = [
    'GeminiExtractor',
    'ExtractedData',
    'parse_response',
    'strip_code_fence',
    'EXTRACTION_PROMPT',
]
