import sys
import os
import csv
import tempfile
import unittest
from pathlib import Path

import openpyxl

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from invoice_ledger.store import Customer, EntityKind, Invoice, LedgerState, Product
from invoice_ledger.output_handler import OutputHandler, export_columns, export_rows


def build_state():
    state = LedgerState()
    state.invoices.add_many([
        Invoice(id="i1", serial_number="S1", customer_name="Bob", product_name="Pen",
                quantity=2, tax=1, total_amount=10, date="2024-01-01",
                customer_id="c1", missing_fields=["productId"]),
        Invoice(id="i2", serial_number="S2", customer_name="Ann", product_name="Ink",
                quantity=1, tax=0.25, total_amount=3.5, date="2024-01-02"),
        Invoice(id="i3", serial_number="S1", customer_name="Bob", product_name="Cup",
                quantity=1, tax=0.5, total_amount=5, date=None),
    ])
    state.products.add_many([
        Product(id="p1", name="Pen", quantity=2, unit_price=4.5, tax=1, price_with_tax=10),
    ])
    state.customers.add_many([
        Customer(id="c1", name="Bob", phone_number="555", total_purchase_amount=15),
        Customer(id="c2", name="Ann", phone_number=None, total_purchase_amount=3.5,
                 missing_fields=["phoneNumber"]),
    ])
    return state


def read_csv(path):
    with open(path, newline='', encoding='utf-8') as f:
        return list(csv.reader(f))


class TestExportRows(unittest.TestCase):

    def test_invoice_columns_drop_internal_fields(self):
        self.assertEqual(
            export_columns(EntityKind.INVOICE),
            ['serialNumber', 'customerName', 'productName', 'quantity', 'tax', 'totalAmount', 'date']
        )

    def test_customer_rows_keep_raw_values(self):
        rows = export_rows(build_state().customers, EntityKind.CUSTOMER)
        self.assertEqual(rows[1]['totalPurchaseAmount'], 3.5)
        self.assertIsNone(rows[1]['phoneNumber'])
        self.assertNotIn('missingFields', rows[1])


class TestOutputHandler(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.out_dir = self.tmp.name
        self.handler = OutputHandler(build_state())

    def tearDown(self):
        self.tmp.cleanup()

    def test_csv_invoice_export(self):
        path = self.handler.export("invoice", "csv", filename="invoices.csv", output_dir=self.out_dir)

        rows = read_csv(path)
        self.assertEqual(rows[0], export_columns(EntityKind.INVOICE))
        self.assertEqual(rows[1], ["S1", "Bob", "Pen", "2", "1.00", "10.00", "2024-01-01"])
        self.assertEqual(rows[2], ["S2", "Ann", "Ink", "1", "0.25", "3.50", "2024-01-02"])
        self.assertEqual(rows[3][-1], "")
        self.assertEqual(len(rows), 4)

    def test_selecting_a_group_exports_all_its_line_items(self):
        path = self.handler.export(
            EntityKind.INVOICE, "csv", selected_ids=["i1"],
            filename="selected.csv", output_dir=self.out_dir
        )

        rows = read_csv(path)[1:]
        self.assertEqual([row[2] for row in rows], ["Pen", "Cup"])

    def test_selection_for_customers(self):
        records = self.handler.select_records(EntityKind.CUSTOMER, ["c2"])
        self.assertEqual([c.id for c in records], ["c2"])
        self.assertEqual(len(self.handler.select_records(EntityKind.CUSTOMER, [])), 2)

    def test_xlsx_export(self):
        path = self.handler.export(
            EntityKind.PRODUCT, "xlsx", filename="products.xlsx", output_dir=self.out_dir
        )

        workbook = openpyxl.load_workbook(path)
        sheet = workbook.active
        self.assertEqual(sheet.title, "Products")
        self.assertEqual(
            [cell.value for cell in sheet[1]],
            ['name', 'quantity', 'unitPrice', 'tax', 'priceWithTax', 'discount']
        )
        self.assertEqual(sheet["A2"].value, "Pen")
        self.assertEqual(sheet["C2"].value, 4.5)
        self.assertEqual(sheet["C2"].number_format, "0.00")
        self.assertIsNone(sheet["F2"].value)
        self.assertEqual(sheet.freeze_panes, "A2")

    def test_export_all(self):
        paths = self.handler.export_all("csv", output_dir=self.out_dir)

        self.assertEqual(set(paths), {"invoice", "product", "customer"})
        for kind, path in paths.items():
            self.assertTrue(Path(path).exists())
            self.assertTrue(Path(path).name.startswith(f"{kind}s_"))

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            self.handler.export(EntityKind.INVOICE, "pdf", output_dir=self.out_dir)


if __name__ == '__main__':
    unittest.main()
