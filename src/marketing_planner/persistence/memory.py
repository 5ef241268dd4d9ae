"""In-memory persistence backend used for local mocking and tests."""

import json
import logging
import uuid
from typing import Optional

from ..errors import PersistenceError
from .base import TABLES, Filters, Persistence, Row, check_table, sort_rows

logger = logging.getLogger(__name__)


def _normalize(row: Row) -> Row:
	"""Copy a row through JSON so callers never share mutable state with the store."""
	try:
		return json.loads(json.dumps(row))
	except (TypeError, ValueError) as e:
		raise PersistenceError(f"Row is not JSON serializable: {e}") from e


def _matches(row: Row, filters: Optional[Filters]) -> bool:
	if not filters:
		return True
	return all(row.get(key) == value for key, value in filters.items())


class MemoryPersistence(Persistence):
	"""Dict-backed row store. Insertion order is kept per table."""

	def __init__(self):
		self._tables: dict[str, dict[str, Row]] = {name: {} for name in TABLES}

	async def select(
		self,
		table: str,
		filters: Optional[Filters] = None,
		order_by: Optional[str] = None,
		ascending: bool = True,
	) -> list[Row]:
		check_table(table)
		filters = _normalize(filters) if filters else None
		rows = [_normalize(r) for r in self._tables[table].values() if _matches(r, filters)]
		return sort_rows(rows, order_by, ascending)

	async def insert(self, table: str, row: Row) -> Row:
		check_table(table)
		stored = _normalize(row)
		stored.setdefault("id", str(uuid.uuid4()))
		if stored["id"] in self._tables[table]:
			raise PersistenceError(f"Duplicate id in {table}: {stored['id']}")
		self._tables[table][stored["id"]] = stored
		logger.debug(f"Inserted {table} row {stored['id']}")
		return _normalize(stored)

	async def update(self, table: str, filters: Filters, patch: Row) -> int:
		check_table(table)
		filters = _normalize(filters)
		patch = _normalize(patch)
		patch.pop("id", None)
		count = 0
		for row in self._tables[table].values():
			if _matches(row, filters):
				row.update(patch)
				count += 1
		return count

	async def delete(self, table: str, filters: Filters) -> int:
		check_table(table)
		filters = _normalize(filters)
		doomed = [rid for rid, row in self._tables[table].items() if _matches(row, filters)]
		for rid in doomed:
			del self._tables[table][rid]
		return len(doomed)

	async def upsert(self, table: str, rows: list[Row]) -> None:
		check_table(table)
		staged = [_normalize(r) for r in rows]
		for row in staged:
			if "id" not in row:
				raise PersistenceError(f"Upsert into {table} requires an id on every row")
		# Apply only after every row validated, so a bad batch changes nothing
		for row in staged:
			existing = self._tables[table].get(row["id"])
			if existing is None:
				self._tables[table][row["id"]] = row
			else:
				existing.update(row)
