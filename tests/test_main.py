import sys
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import main
from invoice_ledger.store import LedgerState
from invoice_ledger.model_inference import ExtractedData
from invoice_ledger.utils.exceptions import UnparsableResponseError


def extraction():
    return ExtractedData(
        invoices=[{"serialNumber": "S1", "customerName": "Bob", "productName": "Pen",
                   "quantity": 2, "tax": 1, "totalAmount": 10, "date": "2024-01-01"}],
        customers=[{"name": "Bob", "phoneNumber": "555", "totalPurchaseAmount": 10}],
    )


@patch("invoice_ledger.model_inference.GeminiExtractor")
class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmp.name)
        self.input = self.dir / "sales.csv"
        self.input.write_text("Serial,Customer\nS1,Bob\n", encoding="utf-8")
        self.out_dir = self.dir / "out"

    def tearDown(self):
        self.tmp.cleanup()

    def test_exports_and_saves_snapshot(self, mock_extractor_cls):
        mock_extractor_cls.return_value.extract_from_text.return_value = extraction()
        snapshot = self.dir / "ledger.json"

        code = main.main([
            "--input", str(self.input), "--format", "csv",
            "--output-dir", str(self.out_dir), "--snapshot", str(snapshot)
        ])

        self.assertEqual(code, 0)
        exported = sorted(p.name.split("_")[0] for p in self.out_dir.iterdir())
        self.assertEqual(exported, ["customers", "invoices", "products"])
        self.assertEqual(LedgerState.load_snapshot(snapshot).counts()['invoices'], 1)

    def test_snapshot_is_extended_on_next_run(self, mock_extractor_cls):
        mock_extractor_cls.return_value.extract_from_text.return_value = extraction()
        snapshot = self.dir / "ledger.json"
        args = ["--input", str(self.input), "--kind", "invoices",
                "--output-dir", str(self.out_dir), "--snapshot", str(snapshot)]

        main.main(args)
        main.main(args)

        self.assertEqual(LedgerState.load_snapshot(snapshot).counts()['invoices'], 2)

    def test_every_file_failing_exits_nonzero(self, mock_extractor_cls):
        mock_extractor_cls.return_value.extract_from_text.side_effect = UnparsableResponseError("??")

        code = main.main(["--input", str(self.input), "--output-dir", str(self.out_dir)])

        self.assertEqual(code, 1)

    def test_missing_input_exits_nonzero(self, mock_extractor_cls):
        code = main.main(["--input", str(self.dir / "nope.pdf"), "--output-dir", str(self.out_dir)])
        self.assertEqual(code, 1)
        mock_extractor_cls.return_value.extract_from_document.assert_not_called()


if __name__ == '__main__':
    unittest.main()
