"""Exceptions shared by the persistence layer and the stores."""


class StoreError(Exception):
	"""Base class for failures surfaced through a store's error slot."""
	pass


class PersistenceError(StoreError):
	"""Raised when the persistence backend rejects or fails an operation."""
	pass


class NotFoundError(StoreError):
	"""Raised when an entity is not present in a store's cache."""
	pass
