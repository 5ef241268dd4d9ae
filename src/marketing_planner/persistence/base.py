"""
Persistence capability - the row-oriented interface the stores call.

Rows are plain JSON-compatible dicts keyed by column name. Every row has a
string ``id``. Filters are equality matches on top-level columns; ordering is
by a single column.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import PersistenceError

TABLES = (
	"plans",
	"templates",
	"template_activities",
	"tasks",
	"documents",
	"activities",
	"channels",
	"messages",
	"ideas",
	"notifications",
	"notification_preferences",
)

Row = dict[str, Any]
Filters = dict[str, Any]


def check_table(table: str) -> None:
	"""Reject relation names the backends do not manage."""
	if table not in TABLES:
		raise PersistenceError(f"Unknown table: {table}")


def sort_rows(rows: list[Row], order_by: Optional[str], ascending: bool = True) -> list[Row]:
	"""Sort rows by one column, with missing values first as SQLite orders NULLs."""
	if not order_by:
		return rows

	def key(row: Row) -> tuple:
		value = row.get(order_by)
		return (value is not None, value if value is not None else 0)

	return sorted(rows, key=key, reverse=not ascending)


class Persistence(ABC):
	"""
	Row store used by the domain stores.

	Usage:
		persistence = SqlitePersistence("data/planner.db")
		await persistence.init()

		row = await persistence.insert("templates", {"title": "Launch"})
		rows = await persistence.select("template_activities", {"template_id": row["id"]}, order_by="order_index")
	"""

	async def init(self) -> None:
		"""Prepare the backend (schemas, connections)."""

	async def close(self) -> None:
		"""Release backend resources."""

	@abstractmethod
	async def select(
		self,
		table: str,
		filters: Optional[Filters] = None,
		order_by: Optional[str] = None,
		ascending: bool = True,
	) -> list[Row]:
		"""Return rows matching every filter, optionally ordered."""

	@abstractmethod
	async def insert(self, table: str, row: Row) -> Row:
		"""Insert one row, assigning an id when absent. Returns the stored row."""

	@abstractmethod
	async def update(self, table: str, filters: Filters, patch: Row) -> int:
		"""Merge ``patch`` into every matching row. Returns the match count."""

	@abstractmethod
	async def delete(self, table: str, filters: Filters) -> int:
		"""Delete every matching row. Returns the match count."""

	@abstractmethod
	async def upsert(self, table: str, rows: list[Row]) -> None:
		"""Merge each row into the row with the same id, inserting when missing."""
