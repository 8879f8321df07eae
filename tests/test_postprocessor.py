import sys
import os
import copy
import unittest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from invoice_ledger.store import Customer, EntityKind, Invoice, Product
from invoice_ledger.postprocessor import (
    AmountNormalizer,
    DateNormalizer,
    QuantityNormalizer,
    RecordNormalizer,
    compute_missing,
    with_missing_fields,
)


class TestComputeMissing(unittest.TestCase):

    def test_complete_record_with_zeros_has_nothing_missing(self):
        """Explicit zero values count as present"""
        invoice = Invoice(id="i1", serial_number="S1", customer_name="Bob", product_name="Pen",
                          quantity=0, tax=0, total_amount=0, date="2024-01-01")
        self.assertIsNone(compute_missing(invoice, EntityKind.INVOICE))

    def test_missing_fields_in_declaration_order(self):
        invoice = Invoice(id="i1", serial_number="S1", customer_name="  ", quantity=1,
                          tax=None, total_amount=3, date="")
        self.assertEqual(
            compute_missing(invoice, EntityKind.INVOICE),
            ['customerName', 'productName', 'tax', 'date']
        )

    def test_is_pure(self):
        """Same input yields the same result and the input is not modified"""
        product = Product(id="p1", name="Pen", quantity=None, unit_price=2.0, tax=0.36,
                          price_with_tax=2.36)
        snapshot = copy.deepcopy(product)
        first = compute_missing(product, EntityKind.PRODUCT)
        second = compute_missing(product, EntityKind.PRODUCT)
        self.assertEqual(first, ['quantity'])
        self.assertEqual(first, second)
        self.assertEqual(product, snapshot)

    def test_optional_fields_are_not_required(self):
        customer = Customer(id="c1", name="Ann", phone_number="555", total_purchase_amount=10)
        self.assertIsNone(compute_missing(customer, EntityKind.CUSTOMER))

    def test_accepts_mappings(self):
        self.assertEqual(
            compute_missing({"name": "Ann", "totalPurchaseAmount": 0}, "customer"),
            ['phoneNumber']
        )

    def test_nan_counts_as_missing(self):
        customer = Customer(id="c1", name="Ann", phone_number="555",
                            total_purchase_amount=float('nan'))
        self.assertEqual(compute_missing(customer, "customer"), ['totalPurchaseAmount'])

    def test_with_missing_fields_returns_new_record(self):
        invoice = Invoice(id="i1", serial_number="S1", missing_fields=['serialNumber'])
        updated = with_missing_fields(invoice)
        self.assertIsNot(updated, invoice)
        self.assertNotIn('serialNumber', updated.missing_fields)
        self.assertEqual(invoice.missing_fields, ['serialNumber'])


class TestNormalizers(unittest.TestCase):

    def test_amounts(self):
        normalizer = AmountNormalizer()
        self.assertEqual(normalizer.to_number("₹1,234.50"), 1234.5)
        self.assertEqual(normalizer.to_number("€ 1.234,56"), 1234.56)
        self.assertEqual(normalizer.to_number("Rs. 240.00 "), 240.0)
        self.assertEqual(normalizer.to_number(7), 7)
        self.assertIsNone(normalizer.to_number("n/a"))
        self.assertIsNone(normalizer.to_number(True))

    def test_quantities(self):
        normalizer = QuantityNormalizer()
        self.assertEqual(normalizer.to_quantity("3"), 3)
        self.assertIsInstance(normalizer.to_quantity(4.0), int)
        self.assertEqual(normalizer.to_quantity(2.5), 2.5)

    def test_dates(self):
        normalizer = DateNormalizer()
        self.assertEqual(normalizer.normalize("15/01/2026"), "2026-01-15")
        self.assertEqual(normalizer.normalize("January 15th, 2026"), "2026-01-15")
        self.assertEqual(normalizer.normalize("2026-01-15"), "2026-01-15")
        self.assertIsNone(normalizer.normalize("not a date"))


class TestRecordNormalizer(unittest.TestCase):

    def test_normalize_invoice(self):
        raw = {
            "serialNumber": " RAY/23-24/286 ",
            "customerName": "Bob",
            "quantity": "2",
            "tax": "₹18.00",
            "totalAmount": 118,
            "date": "15/01/2026",
            "vendor": "dropped",
            "missingFields": ["productName"],
        }
        self.assertEqual(RecordNormalizer(normalize_values=True).normalize(raw, EntityKind.INVOICE), {
            "serialNumber": "RAY/23-24/286",
            "customerName": "Bob",
            "quantity": 2,
            "tax": 18.0,
            "totalAmount": 118,
            "date": "2026-01-15",
            "missingFields": ["productName"],
        })

    def test_unparsable_date_is_kept(self):
        result = RecordNormalizer(normalize_values=True).normalize({"date": "sometime"}, "invoice")
        self.assertEqual(result["date"], "sometime")

    def test_empty_missing_fields_not_kept(self):
        result = RecordNormalizer(normalize_values=True).normalize(
            {"name": "Pen", "missingFields": []}, "product"
        )
        self.assertNotIn("missingFields", result)

    def test_values_untouched_when_disabled(self):
        result = RecordNormalizer(normalize_values=False).normalize(
            {"quantity": "2", "extra": 1}, "product"
        )
        self.assertEqual(result, {"quantity": "2"})


if __name__ == '__main__':
    unittest.main()
