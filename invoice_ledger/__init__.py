"""
Invoice Ledger - Source Package.

This package extracts invoices, products and customers from business
documents with a Gemini model and keeps them consistent while they are
edited. Each module has a single responsibility.

Modules:
    - input_handler: PDF, image and spreadsheet input processing
    - model_inference: Gemini extraction client and response parsing
    - postprocessor: Missing-field validation and value normalization
    - store: Record models, entity collections and ledger state
    - engine: Invoice grouping, table views and edit propagation
    - ingestion: Extraction ingestion and the per-file pipeline
    - output_handler: Excel and CSV export

Architecture:
    Input → Model Inference → Post-Processing → Store → Output
                                                  ↕
                                      Engine (grouping, propagation)
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'model_inference',
    'postprocessor',
    'store',
    'engine',
    'ingestion',
    'output_handler',
    'utils'
]
