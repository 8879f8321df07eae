import sys
import os
import io
import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import CONFIG_ENV_VAR, ConfigurationManager, get_config
from invoice_ledger.utils.logger import get_logger, set_log_level, setup_logger
from invoice_ledger.postprocessor import AmountNormalizer, DateNormalizer


class TestConfiguration(unittest.TestCase):

    def setUp(self):
        ConfigurationManager.reset()
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        ConfigurationManager.reset()
        self.tmp.cleanup()

    def _write(self, text):
        path = Path(self.tmp.name, "settings.yaml")
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_default_settings(self):
        self.assertEqual(get_config("views.invoices.sort_direction"), "desc")
        self.assertEqual(get_config("ingestion.id_prefixes.customer"), "cust")
        self.assertEqual(get_config("no.such.key", 7), 7)
        self.assertTrue(Path(get_config("paths.output_dir")).is_absolute())

    def test_normalizers_read_postprocessing_section(self):
        self.assertEqual(get_config("postprocessing.date.output_format"), "%Y-%m-%d")
        self.assertIn("INR", get_config("postprocessing.amount.currency_codes"))

        path = self._write(
            "postprocessing:\n"
            "  date:\n"
            "    output_format: '%d.%m.%Y'\n"
            "    input_formats: ['%Y-%m-%d']\n"
            "  amount:\n"
            "    currency_symbols: []\n"
            "    currency_codes: [CHF]\n"
        )
        ConfigurationManager.reset()
        ConfigurationManager(path)

        self.assertEqual(DateNormalizer().normalize("2026-01-15"), "15.01.2026")
        amounts = AmountNormalizer()
        self.assertEqual(amounts.to_number("CHF 12.50"), 12.5)
        self.assertIsNone(amounts.to_number("USD 3"))

    def test_environment_variable_selects_file(self):
        path = self._write("output:\n  csv:\n    delimiter: ';'\n")
        with patch.dict(os.environ, {CONFIG_ENV_VAR: path}):
            self.assertEqual(get_config("output.csv.delimiter"), ";")

    def test_explicit_path_wins(self):
        path = self._write("extraction:\n  model_name: other-model\n")
        with patch.dict(os.environ, {CONFIG_ENV_VAR: "/nonexistent/settings.yaml"}):
            self.assertEqual(ConfigurationManager(path).get("extraction.model_name"), "other-model")

    def test_section_is_a_copy(self):
        section = ConfigurationManager().section("views")
        section["invoices"] = None
        self.assertIsNotNone(get_config("views.invoices"))
        self.assertEqual(ConfigurationManager().section("missing"), {})

    def test_invalid_sort_direction(self):
        path = self._write("views:\n  products:\n    sort_direction: sideways\n")
        with self.assertRaises(ValueError):
            ConfigurationManager(path)

    def test_invalid_money_decimals(self):
        path = self._write("output:\n  money_decimals: -1\n")
        with self.assertRaises(ValueError):
            ConfigurationManager(path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigurationManager("/nonexistent/settings.yaml")


class TestLogger(unittest.TestCase):

    def tearDown(self):
        setup_logger(level="INFO")

    def test_namespace(self):
        self.assertEqual(get_logger("main").name, "invoice_ledger.main")
        self.assertEqual(get_logger("invoice_ledger.engine").name, "invoice_ledger.engine")
        self.assertEqual(get_logger("invoice_ledgerx").name, "invoice_ledger.invoice_ledgerx")

    def test_console_output_and_level_change(self):
        stream = io.StringIO()
        setup_logger(level="INFO", log_format="%(levelname)s %(message)s", stream=stream)
        logger = get_logger("tests")

        logger.debug("hidden")
        logger.info("shown")
        set_log_level("DEBUG")
        logger.debug("now visible")

        self.assertEqual(stream.getvalue().splitlines(), ["INFO shown", "DEBUG now visible"])
        self.assertEqual(logging.getLogger("invoice_ledger").level, logging.DEBUG)

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp, "logs", "ledger.log")
            setup_logger(level="INFO", log_file=str(log_file), stream=io.StringIO())
            get_logger("tests").warning("written to file")
            for handler in logging.getLogger("invoice_ledger").handlers:
                handler.flush()

            self.assertIn("written to file", log_file.read_text(encoding="utf-8"))
            setup_logger(level="INFO")


if __name__ == '__main__':
    unittest.main()
