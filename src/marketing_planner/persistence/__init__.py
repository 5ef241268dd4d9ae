"""Persistence backends - the row store behind every domain store."""

from .base import TABLES, Persistence
from .memory import MemoryPersistence
from .sqlite import SqlitePersistence

__all__ = [
	"TABLES",
	"Persistence",
	"MemoryPersistence",
	"SqlitePersistence",
	"create_persistence",
]


def create_persistence(config) -> Persistence:
	"""Build the backend named by ``config.backend``."""
	if config.backend == "memory":
		return MemoryPersistence()
	return SqlitePersistence(str(config.db_path))
