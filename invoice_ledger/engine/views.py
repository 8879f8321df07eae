"""
Table View Module.

Search, sort and row selection for the three ledger tables. A TableView
holds only view state (search text, sort field and direction, selected
ids); rows are always passed in freshly derived, so the visible result
is recomputed whenever the data or the view state changes.

Invoices are viewed as GroupedInvoice rows, products and customers as
their records.

Author: ML Engineering Team
"""

from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from config import get_config
from invoice_ledger.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

# Internal identifiers are not searchable
HIDDEN_FROM_SEARCH = frozenset({'id', 'invoiceIds', 'customerId', 'productId'})

DEFAULT_SORT = {
    'invoices': ('date', 'desc'),
    'products': ('name', 'asc'),
    'customers': ('name', 'asc'),
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _display_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(_display_text(item) for item in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _sort_key(value: Any) -> Tuple[int, Any]:
    # numbers before text so mixed columns never compare int to str
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, _display_text(value))


class TableView:
    """
    View state for one table.

    Attributes:
        sort_field: Wire name of the column being sorted.
        sort_direction: SortDirection.ASC or SortDirection.DESC.
        search_term: Case-insensitive substring filter.
        selected_ids: Ids of selected rows, in selection order.

    Example:
        >>> view = TableView.for_table("invoices")
        >>> view.set_search("bob")
        >>> rows = view.apply(group_by_serial(state.invoices.all()))
        >>> view.toggle_sort("totalAmount")   # ascending
        >>> view.toggle_sort("totalAmount")   # descending
    """

    def __init__(
        self,
        sort_field: str,
        sort_direction: str = "asc",
        search_term: str = ""
    ) -> None:
        self.sort_field = sort_field
        self.sort_direction = SortDirection(sort_direction)
        self.search_term = search_term
        self.selected_ids: List[str] = []

    @classmethod
    def for_table(cls, table: str) -> 'TableView':
        """
        Create a view with the configured default sort for a table.

        Args:
            table: "invoices", "products" or "customers".
        """
        default_field, default_direction = DEFAULT_SORT[table]
        return cls(
            sort_field=get_config(f"views.{table}.sort_field", default_field),
            sort_direction=get_config(f"views.{table}.sort_direction", default_direction),
        )

    # Search and sort

    def set_search(self, term: str) -> None:
        self.search_term = term or ""

    def toggle_sort(self, field_name: str) -> None:
        """
        Sort by a column. Repeating the current column flips the direction;
        a different column starts ascending.
        """
        if field_name == self.sort_field:
            self.sort_direction = (
                SortDirection.DESC if self.sort_direction is SortDirection.ASC
                else SortDirection.ASC
            )
        else:
            self.sort_field = field_name
            self.sort_direction = SortDirection.ASC
        logger.debug(f"Sort set to {self.sort_field} {self.sort_direction.value}")

    def matches(self, row: Any) -> bool:
        """True if any visible value of the row contains the search term."""
        if not self.search_term:
            return True
        needle = self.search_term.lower()
        for key, value in row.to_dict().items():
            if key in HIDDEN_FROM_SEARCH:
                continue
            if needle in _display_text(value).lower():
                return True
        return False

    def apply(self, rows: Iterable[Any]) -> List[Any]:
        """
        Filter and sort rows.

        The sort is stable. Rows with no value in the sort column go last
        in either direction.
        """
        filtered = [row for row in rows if self.matches(row)]

        present = [row for row in filtered if row.get(self.sort_field) is not None]
        absent = [row for row in filtered if row.get(self.sort_field) is None]

        present.sort(
            key=lambda row: _sort_key(row.get(self.sort_field)),
            reverse=self.sort_direction is SortDirection.DESC
        )
        return present + absent

    # Selection

    def toggle_select(self, row_id: str) -> None:
        if row_id in self.selected_ids:
            self.selected_ids.remove(row_id)
        else:
            self.selected_ids.append(row_id)

    def toggle_select_all(self, visible_rows: Sequence[Any]) -> None:
        """Select every visible row, or clear the selection if all already are."""
        visible_ids = [row.id for row in visible_rows]
        if visible_ids and set(visible_ids) <= set(self.selected_ids):
            self.selected_ids = []
        else:
            self.selected_ids = visible_ids

    def clear_selection(self) -> None:
        self.selected_ids = []

    def selection(self) -> Optional[List[str]]:
        """Selected ids, or None when nothing is selected (meaning: all rows)."""
        return list(self.selected_ids) or None
