"""
Cross-Entity Propagation Module.

The ledger joins invoices to customers and products by name, not by id.
PropagationEngine is the single place that keeps those name references
consistent when the user edits data:

    - Editing a grouped invoice rewrites every member line item, and a
      customer name change there renames the matching Customer, renames
      the customer's other invoices and recomputes its purchase total.
    - Renaming a Customer or Product renames every invoice that carried
      the old name.
    - Deletes never cascade; dangling names are left in place.

Every entry point runs under `state.lock` and returns only after all
derived updates are applied. Missing fields are recomputed on every
record written. Members or records that vanished since a view was
derived are skipped, never reported as errors.

Author: ML Engineering Team
"""

from dataclasses import dataclass
from typing import List, Optional

from invoice_ledger.utils.logger import get_logger
from invoice_ledger.store.models import Customer, Invoice, Product
from invoice_ledger.store.state import LedgerState
from invoice_ledger.postprocessor.validators import with_missing_fields
from .grouping import GroupedInvoice, find_group, group_by_serial

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class GroupEdit:
    """
    New values for the shared fields of a grouped invoice.

    Empty or None values keep each member's current value. product_name is
    applied only when the group has a single member.
    """
    serial_number: Optional[str] = None
    customer_name: Optional[str] = None
    date: Optional[str] = None
    product_name: Optional[str] = None


class PropagationEngine:
    """
    Applies user edits and fans them out across the ledger.

    Attributes:
        state: The LedgerState being edited.

    Example:
        >>> engine = PropagationEngine(state)
        >>> group = engine.grouped_invoices()[0]
        >>> engine.edit_grouped_invoice(group, GroupEdit(customer_name="Alice"))
        >>> engine.edit_product(product.replace(name="Gadget"))
    """

    def __init__(self, state: LedgerState) -> None:
        self.state = state

    # Read path

    def grouped_invoices(self) -> List[GroupedInvoice]:
        """Derive grouped invoices from a consistent snapshot of the flat collection."""
        with self.state.lock:
            return group_by_serial(self.state.invoices.all())

    def get_group(self, group_id: str) -> Optional[GroupedInvoice]:
        return find_group(self.grouped_invoices(), group_id)

    # Invoices

    def update_invoice(self, invoice: Invoice) -> bool:
        """Update one flat invoice, recomputing its missing fields."""
        with self.state.lock:
            return self.state.invoices.update(with_missing_fields(invoice))

    def edit_grouped_invoice(self, group: GroupedInvoice, edit: GroupEdit) -> List[Invoice]:
        """
        Apply an edit to every member of a grouped invoice.

        Args:
            group: The group as derived by the caller.
            edit: New shared values.

        Returns:
            The updated member invoices (members no longer present are skipped).
        """
        with self.state.lock:
            updated_members: List[Invoice] = []
            renamed_from: List[str] = []

            for invoice_id in group.invoice_ids:
                current = self.state.invoices.get(invoice_id)
                if current is None:
                    logger.warning(
                        f"Invoice {invoice_id} of group {group.serial_number!r} "
                        f"no longer exists, skipped"
                    )
                    continue

                changes = {
                    'serial_number': edit.serial_number or current.serial_number,
                    'customer_name': edit.customer_name or current.customer_name,
                    'date': edit.date or current.date,
                }
                if group.is_single_product and edit.product_name:
                    changes['product_name'] = edit.product_name

                updated = with_missing_fields(current.replace(**changes))
                self.state.invoices.update(updated)
                updated_members.append(updated)

                old_name = current.customer_name
                if old_name != updated.customer_name and old_name not in renamed_from:
                    renamed_from.append(old_name)

            for old_name in renamed_from:
                self._sync_customer_rename(old_name, edit.customer_name)

            logger.info(
                f"Edited group {group.serial_number!r}: "
                f"{len(updated_members)}/{group.member_count} member(s) updated"
            )
            return updated_members

    def delete_grouped_invoice(self, group: GroupedInvoice) -> int:
        """
        Delete the member invoices of a group, and nothing else.

        Returns:
            Number of invoices removed.
        """
        with self.state.lock:
            removed = sum(1 for invoice_id in group.invoice_ids if self.state.invoices.delete(invoice_id))
        logger.info(f"Deleted group {group.serial_number!r} ({removed} invoice(s))")
        return removed

    # Customers

    def edit_customer(self, customer: Customer) -> Optional[Customer]:
        """
        Save an edited customer and propagate a name change to invoices.

        When the name changed, every invoice carrying the old name is
        renamed. The purchase total is always recomputed from the invoices
        carrying the saved name (0 when there are none); an edited total is
        not kept.

        Returns:
            The stored customer, or None if no customer has that id.
        """
        with self.state.lock:
            previous = self.state.customers.get(customer.id)
            if previous is None:
                logger.debug(f"Customer {customer.id} not found, edit ignored")
                return None

            if previous.name != customer.name:
                renamed = self._rename_invoice_customers(previous.name, customer.name)
                logger.info(
                    f"Customer renamed {previous.name!r} -> {customer.name!r}, "
                    f"{renamed} invoice(s) updated"
                )

            updated = customer.replace(total_purchase_amount=self._customer_total(customer.name))
            updated = with_missing_fields(updated)
            self.state.customers.update(updated)
            return updated

    def delete_customer(self, customer_id: str) -> bool:
        """Delete a customer. Invoices keep referencing its name."""
        with self.state.lock:
            return self.state.customers.delete(customer_id)

    # Products

    def edit_product(self, product: Product) -> Optional[Product]:
        """
        Save an edited product and propagate a name change to invoices.

        Returns:
            The stored product, or None if no product has that id.
        """
        with self.state.lock:
            previous = self.state.products.get(product.id)
            if previous is None:
                logger.debug(f"Product {product.id} not found, edit ignored")
                return None

            updated = with_missing_fields(product)
            self.state.products.update(updated)

            if previous.name != product.name:
                renamed = 0
                for invoice in self.state.invoices.find_by('product_name', previous.name):
                    self.state.invoices.update(
                        with_missing_fields(invoice.replace(product_name=product.name))
                    )
                    renamed += 1
                logger.info(
                    f"Product renamed {previous.name!r} -> {product.name!r}, "
                    f"{renamed} invoice(s) updated"
                )
            return updated

    def delete_product(self, product_id: str) -> bool:
        """Delete a product. Invoices keep referencing its name."""
        with self.state.lock:
            return self.state.products.delete(product_id)

    # Internal

    def _sync_customer_rename(self, old_name: Optional[str], new_name: str) -> None:
        """
        Follow a customer name change made through a grouped invoice.

        Only happens when a Customer with the old name exists. Invoices
        outside the edited group that still carry the old name are renamed
        first, so the total covers every invoice now under the new name.
        """
        matches = self.state.customers.find_by('name', old_name)
        if not matches:
            logger.debug(f"No customer named {old_name!r}, rename not propagated")
            return
        if len(matches) > 1:
            logger.warning(f"{len(matches)} customers named {old_name!r}, renaming the first")

        self._rename_invoice_customers(old_name, new_name)

        customer = matches[0].replace(
            name=new_name,
            total_purchase_amount=self._customer_total(new_name),
        )
        self.state.customers.update(with_missing_fields(customer))
        logger.info(f"Customer {old_name!r} renamed to {new_name!r} from invoice edit")

    def _rename_invoice_customers(self, old_name: str, new_name: Optional[str]) -> int:
        renamed = 0
        for invoice in self.state.invoices.find_by('customer_name', old_name):
            self.state.invoices.update(
                with_missing_fields(invoice.replace(customer_name=new_name))
            )
            renamed += 1
        return renamed

    def _customer_total(self, name: Optional[str]) -> float:
        """Sum of totalAmount over invoices carrying the name (absent amounts count as 0)."""
        return sum(
            invoice.total_amount or 0
            for invoice in self.state.invoices.find_by('customer_name', name)
        )
