#!/usr/bin/env python3
"""
Invoice Ledger - Main Entry Point.

This is the command-line entry point for the invoice ledger. It runs
documents through extraction into an in-memory ledger, optionally
persisted as a JSON snapshot between runs, and exports the collections.

Usage:
    Command Line:
        python main.py --input invoice.pdf
        python main.py --input ./invoices/ sales.xlsx --format csv --kind invoices
        python main.py --input ./invoices/ --snapshot ledger.json

    Python:
        from main import run_ledger
        state, outcomes = run_ledger(["invoice.pdf"])

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, List, Tuple

from dotenv import load_dotenv

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from invoice_ledger.utils.logger import setup_logger_from_config, set_log_level, get_logger
from invoice_ledger.utils.exceptions import InvoiceLedgerError

KIND_CHOICES = ("invoices", "products", "customers", "all")


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Invoice Ledger - extract invoices, products and customers from documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process a single invoice:
        python main.py --input invoice.pdf

    Process a directory and a spreadsheet, export invoices as CSV:
        python main.py --input ./invoices/ sales.xlsx --format csv --kind invoices

    Keep the ledger between runs:
        python main.py --input ./invoices/ --snapshot ledger.json
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        nargs="+",
        required=True,
        help="Input files and/or directories (pdf, png, jpg, jpeg, webp, xlsx, xls, csv)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default=None,
        help="Directory for exported files (default: paths.output_dir)"
    )

    parser.add_argument(
        "--format", "-f",
        choices=("xlsx", "csv"),
        default="xlsx",
        help="Export format (default: xlsx)"
    )

    parser.add_argument(
        "--kind", "-k",
        choices=KIND_CHOICES,
        default="all",
        help="Collection to export (default: all)"
    )

    parser.add_argument(
        "--snapshot", "-s",
        type=str,
        default=None,
        help="JSON snapshot loaded before processing (if present) and saved after"
    )

    # Processing options
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="Gemini API key (default: GEMINI_API_KEY or GOOGLE_API_KEY)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    if args.config:
        ConfigurationManager.reset()
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        set_log_level("DEBUG")

    logger.info("=" * 60)
    logger.info("INVOICE LEDGER")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {', '.join(args.input)}")

    return config


def run_ledger(
    inputs: List[str],
    api_key: Optional[str] = None,
    snapshot_path: Optional[str] = None
) -> Tuple['LedgerState', List['FileOutcome']]:
    """
    Run documents through the ledger pipeline.

    This is the main programmatic entry point. Files are processed one at
    a time; a failing file is reported in its outcome and never stops the
    rest of the batch.

    Args:
        inputs: Files and/or directories to process.
        api_key: Gemini API key. If None, read from the environment.
        snapshot_path: Optional snapshot to load first, if it exists.

    Returns:
        Tuple of (ledger state, per-file outcomes).

    Example:
        >>> state, outcomes = run_ledger(["invoices/"])
        >>> print(state.counts())
    """
    logger = get_logger(__name__)

    # Import pipeline components
    from invoice_ledger.store import LedgerState
    from invoice_ledger.model_inference import GeminiExtractor
    from invoice_ledger.ingestion import LedgerPipeline

    if snapshot_path and Path(snapshot_path).exists():
        state = LedgerState.load_snapshot(snapshot_path)
    else:
        state = LedgerState()

    logger.info("Initializing pipeline components...")
    pipeline = LedgerPipeline(state, extractor=GeminiExtractor(api_key=api_key))

    files = pipeline.input_handler.collect_files(inputs)
    if not files:
        logger.warning("No supported files found")
        return state, []

    logger.info(f"Processing {len(files)} files...")
    outcomes = pipeline.process_files(files)

    return state, outcomes


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    load_dotenv()
    args = parse_arguments(argv)

    try:
        initialize_system(args)
        logger = get_logger(__name__)

        from invoice_ledger.output_handler import OutputHandler
        from invoice_ledger.store import EntityKind

        state, outcomes = run_ledger(args.input, args.api_key, args.snapshot)

        for outcome in outcomes:
            if not outcome.success:
                logger.warning(f"  {outcome.filename}: {outcome.error_type}: {outcome.error}")

        # Export
        output_handler = OutputHandler(state)
        if args.kind == "all":
            paths = output_handler.export_all(args.format, output_dir=args.output_dir)
        else:
            kind = EntityKind(args.kind[:-1])
            paths = {kind.value: output_handler.export(kind, args.format, output_dir=args.output_dir)}

        for kind_name, path in paths.items():
            logger.info(f"Exported {kind_name}s: {path}")

        if args.snapshot:
            state.save_snapshot(args.snapshot)

        counts = state.counts()
        logger.info("=" * 60)
        logger.info(
            f"Ledger complete. {len(outcomes)} file(s); "
            f"{counts['invoices']} invoices, {counts['products']} products, "
            f"{counts['customers']} customers"
        )
        logger.info("=" * 60)

        if outcomes and not any(outcome.success for outcome in outcomes):
            return 1
        return 0

    except InvoiceLedgerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
