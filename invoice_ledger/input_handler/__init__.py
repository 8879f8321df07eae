"""
Input Handler Module for Invoice Ledger.

This module provides functionality for:
    - Detecting content kinds (PDF, image, spreadsheet, CSV)
    - Loading and validating input files
    - Orientation correction and downscaling of images
    - Flattening spreadsheets to text

Supported formats:
    - PDF (digital and scanned)
    - Images: PNG, JPG, JPEG, WEBP
    - Spreadsheets: XLSX, XLS, CSV

Author: ML Engineering Team
"""

from .handler import InputHandler, InputDocument
from .pdf_processor import PDFProcessor
from .image_processor import ImageProcessor
from .spreadsheet_parser import SpreadsheetParser

__all__ = ['InputHandler', 'InputDocument', 'PDFProcessor', 'ImageProcessor', 'SpreadsheetParser']
