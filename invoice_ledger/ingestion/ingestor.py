"""
Extraction Ingestor Module.

Merges the output of one extraction call into the ledger:

    1. Normalize each raw attribute bag (RecordNormalizer)
    2. Assign a fresh identity: inv-/prod-/cust- prefix
    3. Keep the service's non-empty missingFields, otherwise compute it
    4. Append the three sequences to their collections, in input order

No reconciliation by name happens here. Two extractions mentioning the
same customer produce two Customer records.

Author: ML Engineering Team
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from config import get_config
from invoice_ledger.utils.logger import get_logger
from invoice_ledger.utils.identity import new_id
from invoice_ledger.store.models import EntityKind, LedgerRecord, record_type
from invoice_ledger.store.state import LedgerState
from invoice_ledger.postprocessor.processor import RecordNormalizer
from invoice_ledger.postprocessor.validators import compute_missing
from invoice_ledger.model_inference.extraction_result import ExtractedData

# Initialize module logger
logger = get_logger(__name__)

# ExtractedData attribute -> entity kind
PAYLOAD_KINDS = (
    ('invoices', EntityKind.INVOICE),
    ('products', EntityKind.PRODUCT),
    ('customers', EntityKind.CUSTOMER),
)

DEFAULT_ID_PREFIXES = {
    EntityKind.INVOICE: 'inv',
    EntityKind.PRODUCT: 'prod',
    EntityKind.CUSTOMER: 'cust',
}


class ExtractionIngestor:
    """
    Turns ExtractedData into ledger records and stores them.

    Attributes:
        state: LedgerState receiving the records.
        normalizer: RecordNormalizer applied to every raw record.
        id_prefixes: Identity prefix per entity kind.

    Example:
        >>> ingestor = ExtractionIngestor(state)
        >>> ingestor.ingest(extracted)
        {'invoices': 3, 'products': 3, 'customers': 1}
    """

    def __init__(
        self,
        state: LedgerState,
        normalizer: Optional[RecordNormalizer] = None
    ) -> None:
        self.state = state
        self.normalizer = normalizer or RecordNormalizer()
        self.id_prefixes = {
            kind: get_config(f"ingestion.id_prefixes.{kind.value}", prefix)
            for kind, prefix in DEFAULT_ID_PREFIXES.items()
        }

    def build_records(
        self,
        raw_records: Sequence[Mapping[str, Any]],
        kind: EntityKind
    ) -> List[LedgerRecord]:
        """
        Build identified records from raw attribute bags.

        Args:
            raw_records: Records as returned by the extraction service.
            kind: Entity kind of every record.

        Returns:
            Records in input order, each with a new id and missingFields set.
        """
        cls = record_type(kind)
        prefix = self.id_prefixes[kind]
        records = []

        for raw in raw_records:
            data = self.normalizer.normalize(raw, kind)
            if not data.get('missingFields'):
                data['missingFields'] = compute_missing(data, kind)
            records.append(cls.from_dict(data, record_id=new_id(prefix)))

        return records

    def ingest(self, extracted: ExtractedData) -> Dict[str, int]:
        """
        Store every record of an extraction.

        Records are built before the lock is taken; all three collections
        are then appended under one acquisition.

        Returns:
            Number of records added per collection.
        """
        built = {
            name: self.build_records(getattr(extracted, name), kind)
            for name, kind in PAYLOAD_KINDS
        }

        with self.state.lock:
            counts = {
                name: self.state.collection(kind).add_many(built[name])
                for name, kind in PAYLOAD_KINDS
            }

        incomplete = sum(
            1 for records in built.values() for record in records if record.missing_fields
        )
        logger.info(
            f"Ingested {counts['invoices']} invoices, {counts['products']} products, "
            f"{counts['customers']} customers from {extracted.source_file or 'extraction'}"
            + (f" ({incomplete} with missing fields)" if incomplete else "")
        )
        return counts
