import sys
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from invoice_ledger.store import LedgerState
from invoice_ledger.ingestion import ExtractionIngestor, LedgerPipeline
from invoice_ledger.input_handler import InputHandler
from invoice_ledger.model_inference import ExtractedData
from invoice_ledger.utils.exceptions import UnparsableResponseError


def sample_extraction(source_file="a.pdf"):
    return ExtractedData(
        invoices=[
            {"serialNumber": "S1", "customerName": "Bob", "productName": "Pen",
             "quantity": 2, "tax": 1, "totalAmount": 10, "date": "2024-01-01"},
            {"serialNumber": "S1", "customerName": "Bob", "productName": "Cup",
             "quantity": 1, "tax": 0.5, "totalAmount": 5},
        ],
        products=[
            {"name": "Pen", "quantity": 2, "unitPrice": 4.5, "tax": 1, "priceWithTax": 10,
             "missingFields": ["discount"]},
        ],
        customers=[{"name": "Bob", "totalPurchaseAmount": 15}],
        source_file=source_file,
    )


class TestExtractionIngestor(unittest.TestCase):

    def setUp(self):
        self.state = LedgerState()
        self.ingestor = ExtractionIngestor(self.state)

    def test_counts_and_order(self):
        counts = self.ingestor.ingest(sample_extraction())

        self.assertEqual(counts, {'invoices': 2, 'products': 1, 'customers': 1})
        self.assertEqual([i.product_name for i in self.state.invoices], ["Pen", "Cup"])

    def test_ids_are_prefixed_and_distinct(self):
        self.ingestor.ingest(sample_extraction())
        self.ingestor.ingest(sample_extraction())

        invoice_ids = self.state.invoices.ids()
        self.assertEqual(len(set(invoice_ids)), 4)
        self.assertTrue(all(i.startswith("inv-") for i in invoice_ids))
        self.assertTrue(self.state.products.ids()[0].startswith("prod-"))
        self.assertTrue(self.state.customers.ids()[0].startswith("cust-"))

    def test_no_reconciliation_by_name(self):
        """The same customer extracted twice yields two records"""
        self.ingestor.ingest(sample_extraction("a.pdf"))
        self.ingestor.ingest(sample_extraction("b.pdf"))
        self.assertEqual([c.name for c in self.state.customers], ["Bob", "Bob"])

    def test_missing_fields_computed_when_absent(self):
        self.ingestor.ingest(sample_extraction())

        first, second = self.state.invoices.all()
        self.assertIsNone(first.missing_fields)
        self.assertEqual(second.missing_fields, ["date"])
        self.assertEqual(self.state.customers.all()[0].missing_fields, ["phoneNumber"])

    def test_reported_missing_fields_are_kept(self):
        self.ingestor.ingest(sample_extraction())
        self.assertEqual(self.state.products.all()[0].missing_fields, ["discount"])

    def test_empty_extraction(self):
        counts = self.ingestor.ingest(ExtractedData())
        self.assertEqual(counts, {'invoices': 0, 'products': 0, 'customers': 0})
        self.assertEqual(len(self.state.invoices), 0)


class TestLedgerPipeline(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.state = LedgerState()
        self.extractor = MagicMock()
        self.pipeline = LedgerPipeline(
            self.state, extractor=self.extractor, input_handler=InputHandler()
        )

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, content):
        path = self.dir / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_tabular_file_is_sent_as_text(self):
        path = self._write("sales.csv", "Serial,Customer\nS1,Bob\n")
        self.extractor.extract_from_text.return_value = sample_extraction("sales.csv")

        outcome = self.pipeline.process_file(path)

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.counts, {'invoices': 2, 'products': 1, 'customers': 1})
        self.extractor.extract_from_text.assert_called_once_with(
            "Serial | Customer\nS1 | Bob", source_file="sales.csv"
        )
        self.extractor.extract_from_document.assert_not_called()

    def test_failing_files_do_not_stop_the_batch(self):
        first = self._write("a.csv", "Serial\nS1\n")
        unsupported = self._write("notes.txt", "hello")
        garbled = self._write("b.csv", "Serial\nS2\n")
        last = self._write("c.csv", "Serial\nS3\n")
        self.extractor.extract_from_text.side_effect = [
            sample_extraction("a.csv"),
            UnparsableResponseError("I could not read this"),
            sample_extraction("c.csv"),
        ]

        outcomes = self.pipeline.process_files([first, unsupported, garbled, last])

        self.assertEqual([o.success for o in outcomes], [True, False, False, True])
        self.assertEqual(outcomes[1].error_type, "UnsupportedFormatError")
        self.assertEqual(outcomes[2].error_type, "UnparsableResponseError")
        self.assertEqual(outcomes[2].counts, {})
        self.assertEqual(self.extractor.extract_from_text.call_count, 3)
        self.assertEqual(len(self.state.invoices), 4)

        summary = LedgerPipeline.summarize(outcomes)
        self.assertEqual(summary, {
            'files': 4, 'succeeded': 2, 'failed': 2,
            'invoices': 4, 'products': 2, 'customers': 2,
        })

    def test_unexpected_error_is_recorded(self):
        self.extractor.extract_from_text.side_effect = RuntimeError("boom")

        outcome = self.pipeline.process_bytes(b"Serial\nS1\n", "upload.csv")

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.error, "Unexpected error: boom")
        self.assertEqual(outcome.error_type, "RuntimeError")
        self.assertEqual(len(self.state.invoices), 0)

    def test_outcome_to_dict(self):
        self.extractor.extract_from_text.return_value = ExtractedData()
        outcome = self.pipeline.process_bytes(b"Serial\nS1\n", "upload.csv")

        data = outcome.to_dict()
        self.assertEqual(data['filename'], "upload.csv")
        self.assertTrue(data['success'])
        self.assertIsNone(data['error'])


if __name__ == '__main__':
    unittest.main()
