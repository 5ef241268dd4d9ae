"""
SQLite persistence backend.

Each relation is a table of ``(id, data)`` where ``data`` holds the row as
JSON. Filters and ordering go through ``json_extract`` so the stores can use
any top-level column without schema migrations.
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Optional

import aiosqlite

from ..errors import PersistenceError
from .base import TABLES, Filters, Persistence, Row, check_table

logger = logging.getLogger(__name__)

# Columns worth an expression index, per table
INDEXED_COLUMNS = {
	"template_activities": "template_id",
	"activities": "plan_id",
	"tasks": "plan_id",
	"documents": "plan_id",
	"messages": "channel_id",
	"plans": "company_id",
}


def _sql_value(value: Any) -> Any:
	"""Convert a filter value to what json_extract returns for it."""
	if isinstance(value, bool):
		return 1 if value else 0
	if hasattr(value, "value"):  # str enums
		return value.value
	return value


def _where(filters: Optional[Filters]) -> tuple[str, list[Any]]:
	if not filters:
		return "1=1", []
	clauses = []
	params: list[Any] = []
	for key, value in filters.items():
		if value is None:
			clauses.append("json_extract(data, ?) IS NULL")
			params.append(f"$.{key}")
		else:
			clauses.append("json_extract(data, ?) = ?")
			params.extend([f"$.{key}", _sql_value(value)])
	return " AND ".join(clauses), params


def _dumps(row: Row) -> str:
	try:
		return json.dumps(row)
	except (TypeError, ValueError) as e:
		raise PersistenceError(f"Row is not JSON serializable: {e}") from e


class SqlitePersistence(Persistence):
	"""
	aiosqlite-backed row store.

	Usage:
		persistence = SqlitePersistence("data/planner.db")
		await persistence.init()
		...
		await persistence.close()
	"""

	def __init__(self, db_path: str):
		"""Initialize the backend. The connection opens lazily in init()."""
		self.db_path = Path(db_path)
		self.db_path.parent.mkdir(parents=True, exist_ok=True)
		self._db: Optional[aiosqlite.Connection] = None

	async def init(self) -> None:
		"""Open the connection and create the schema."""
		try:
			self._db = await aiosqlite.connect(str(self.db_path))
			self._db.row_factory = aiosqlite.Row

			for table in TABLES:
				await self._db.execute(f"""
					CREATE TABLE IF NOT EXISTS {table} (
						id TEXT PRIMARY KEY,
						data TEXT NOT NULL
					)
				""")

			for table, column in INDEXED_COLUMNS.items():
				await self._db.execute(f"""
					CREATE INDEX IF NOT EXISTS idx_{table}_{column}
					ON {table}(json_extract(data, '$.{column}'))
				""")

			await self._db.commit()
		except aiosqlite.Error as e:
			raise PersistenceError(f"Could not open database {self.db_path}: {e}") from e
		logger.info(f"Persistence initialized: {self.db_path}")

	async def close(self) -> None:
		"""Close the database connection."""
		if self._db:
			await self._db.close()
			self._db = None

	async def _conn(self) -> aiosqlite.Connection:
		if not self._db:
			await self.init()
		return self._db

	async def _fetch(self, table: str, filters: Optional[Filters], suffix: str = "") -> list[Row]:
		db = await self._conn()
		where, params = _where(filters)
		async with db.execute(
			f"SELECT id, data FROM {table} WHERE {where}{suffix}",
			params,
		) as cursor:
			rows = await cursor.fetchall()
		return [json.loads(row["data"]) for row in rows]

	async def select(
		self,
		table: str,
		filters: Optional[Filters] = None,
		order_by: Optional[str] = None,
		ascending: bool = True,
	) -> list[Row]:
		check_table(table)
		suffix = ""
		if order_by:
			direction = "ASC" if ascending else "DESC"
			# rowid breaks ties so equal keys keep insertion order
			suffix = f" ORDER BY json_extract(data, '$.{order_by}') {direction}, rowid ASC"
		try:
			return await self._fetch(table, filters, suffix)
		except aiosqlite.Error as e:
			raise PersistenceError(f"Select from {table} failed: {e}") from e

	async def insert(self, table: str, row: Row) -> Row:
		check_table(table)
		stored = dict(row)
		stored.setdefault("id", str(uuid.uuid4()))
		payload = _dumps(stored)
		db = await self._conn()
		try:
			await db.execute(
				f"INSERT INTO {table} (id, data) VALUES (?, ?)",
				(stored["id"], payload),
			)
			await db.commit()
		except aiosqlite.Error as e:
			await db.rollback()
			raise PersistenceError(f"Insert into {table} failed: {e}") from e
		logger.debug(f"Inserted {table} row {stored['id']}")
		return json.loads(payload)

	async def update(self, table: str, filters: Filters, patch: Row) -> int:
		check_table(table)
		patch = {k: v for k, v in patch.items() if k != "id"}
		db = await self._conn()
		try:
			matches = await self._fetch(table, filters)
			for current in matches:
				current.update(json.loads(_dumps(patch)))
				await db.execute(
					f"UPDATE {table} SET data = ? WHERE id = ?",
					(json.dumps(current), current["id"]),
				)
			await db.commit()
		except aiosqlite.Error as e:
			await db.rollback()
			raise PersistenceError(f"Update of {table} failed: {e}") from e
		return len(matches)

	async def delete(self, table: str, filters: Filters) -> int:
		check_table(table)
		where, params = _where(filters)
		db = await self._conn()
		try:
			cursor = await db.execute(f"DELETE FROM {table} WHERE {where}", params)
			count = cursor.rowcount
			await db.commit()
		except aiosqlite.Error as e:
			await db.rollback()
			raise PersistenceError(f"Delete from {table} failed: {e}") from e
		return count

	async def upsert(self, table: str, rows: list[Row]) -> None:
		check_table(table)
		for row in rows:
			if "id" not in row:
				raise PersistenceError(f"Upsert into {table} requires an id on every row")
		staged = [json.loads(_dumps(row)) for row in rows]
		db = await self._conn()
		try:
			# One commit for the whole batch
			for row in staged:
				existing = await self._fetch(table, {"id": row["id"]})
				merged = existing[0] if existing else {}
				merged.update(row)
				await db.execute(
					f"INSERT INTO {table} (id, data) VALUES (?, ?) "
					f"ON CONFLICT(id) DO UPDATE SET data = excluded.data",
					(row["id"], json.dumps(merged)),
				)
			await db.commit()
		except aiosqlite.Error as e:
			await db.rollback()
			raise PersistenceError(f"Upsert into {table} failed: {e}") from e
