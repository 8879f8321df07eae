import sys
import os
import json
import tempfile
import unittest

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from invoice_ledger.utils.identity import new_id
from invoice_ledger.utils.exceptions import SnapshotError
from invoice_ledger.store import Customer, EntityCollection, EntityKind, Invoice, LedgerState, Product


class TestIdentity(unittest.TestCase):

    def test_ids_are_unique_within_one_millisecond(self):
        """A burst of ids never repeats"""
        ids = [new_id("inv") for _ in range(2000)]
        self.assertEqual(len(set(ids)), 2000)

    def test_prefix(self):
        self.assertTrue(new_id("cust").startswith("cust-"))
        self.assertEqual(len(new_id("prod").split("-")), 3)


class TestEntityCollection(unittest.TestCase):

    def setUp(self):
        self.collection = EntityCollection(EntityKind.INVOICE)
        self.collection.add_many([
            Invoice(id="a", serial_number="S1"),
            Invoice(id="b", serial_number="S2"),
            Invoice(id="c", serial_number="S3"),
        ])

    def test_add_many_preserves_order(self):
        self.assertEqual(self.collection.ids(), ["a", "b", "c"])
        self.assertEqual(self.collection.add_many([Invoice(id="d")]), 1)
        self.assertEqual(self.collection.ids()[-1], "d")

    def test_update_replaces_in_place(self):
        self.assertTrue(self.collection.update(Invoice(id="b", serial_number="S9")))
        self.assertEqual(self.collection.ids(), ["a", "b", "c"])
        self.assertEqual(self.collection.get("b").serial_number, "S9")

    def test_update_unknown_id_is_silent_noop(self):
        """Updating a vanished record changes nothing and raises nothing"""
        before = self.collection.all()
        self.assertFalse(self.collection.update(Invoice(id="zzz", serial_number="S1")))
        self.assertEqual(self.collection.all(), before)

    def test_delete_unknown_id_is_silent_noop(self):
        self.assertFalse(self.collection.delete("zzz"))
        self.assertEqual(len(self.collection), 3)

    def test_delete(self):
        self.assertTrue(self.collection.delete("a"))
        self.assertNotIn("a", self.collection)
        self.assertEqual(self.collection.ids(), ["b", "c"])

    def test_find_by(self):
        self.assertEqual([r.id for r in self.collection.find_by("serial_number", "S2")], ["b"])
        self.assertEqual(self.collection.find_by("serial_number", "s2"), [])


class TestRecords(unittest.TestCase):

    def test_to_dict_omits_empty_optional_and_missing(self):
        data = Customer(id="c1", name="Ann", phone_number="555", total_purchase_amount=0).to_dict()
        self.assertEqual(data, {
            'id': 'c1', 'name': 'Ann', 'phoneNumber': '555', 'totalPurchaseAmount': 0
        })

    def test_from_dict_uses_given_id(self):
        product = Product.from_dict({'id': 'old', 'name': 'Pen', 'missingFields': []}, record_id="new")
        self.assertEqual(product.id, "new")
        self.assertIsNone(product.missing_fields)

    def test_get_by_wire_name(self):
        invoice = Invoice(id="i1", total_amount=12.5, missing_fields=['date'])
        self.assertEqual(invoice.get('totalAmount'), 12.5)
        self.assertEqual(invoice.get('missingFields'), ['date'])
        self.assertIsNone(invoice.get('unknown'))


class TestLedgerState(unittest.TestCase):

    def _populated_state(self):
        state = LedgerState()
        state.invoices.add_many([
            Invoice(id="i1", serial_number="S1", customer_name="Bob", product_name="Pen",
                    quantity=2, tax=1, total_amount=10, date="2024-01-01"),
            Invoice(id="i2", serial_number="S1", customer_name="Bob", product_name=None,
                    quantity=1, tax=0.5, total_amount=5, date="2024-01-01",
                    missing_fields=['productName']),
        ])
        state.products.add_many([Product(id="p1", name="Pen", quantity=2, unit_price=4.5,
                                         tax=1, price_with_tax=10, discount=0.5)])
        state.customers.add_many([Customer(id="c1", name="Bob", phone_number="555",
                                           total_purchase_amount=15, email="bob@example.com")])
        return state

    def test_collection_lookup(self):
        state = LedgerState()
        self.assertIs(state.collection(EntityKind.PRODUCT), state.products)
        self.assertIs(state.collection("customer"), state.customers)

    def test_snapshot_round_trip(self):
        state = self._populated_state()

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "ledger.json")
            state.save_snapshot(path)
            restored = LedgerState.load_snapshot(path)

        self.assertEqual(restored.to_dict(), state.to_dict())
        self.assertEqual(restored.invoices.get("i2").missing_fields, ['productName'])
        self.assertEqual(restored.counts(), {'invoices': 2, 'products': 1, 'customers': 1})

    def test_load_snapshot_rejects_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "ledger.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{not json")
            with self.assertRaises(SnapshotError):
                LedgerState.load_snapshot(path)

    def test_load_snapshot_rejects_non_object_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "ledger.json")
            with open(path, "w", encoding="utf-8") as f:
                json.dump([1, 2], f)
            with self.assertRaises(SnapshotError):
                LedgerState.load_snapshot(path)

    def test_clear(self):
        state = self._populated_state()
        state.clear()
        self.assertEqual(state.counts(), {'invoices': 0, 'products': 0, 'customers': 0})


if __name__ == '__main__':
    unittest.main()
