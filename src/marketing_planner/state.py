"""
Shared store plumbing: the loading/error slots and the operation wrapper.

Every store operation runs inside ``_operation``. A ``StoreError`` or a
validation ``ValueError`` raised inside is logged, its message is stored in
``error`` and ``loading`` is cleared. The cache is only written after the
persistence call returns, so an aborted operation leaves it untouched.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)


def now_iso() -> str:
	"""Current local time as an ISO-8601 string."""
	return datetime.now().isoformat()


def new_id() -> str:
	return str(uuid.uuid4())


class StoreState:
	"""Base for the domain stores: one ``loading`` flag and one ``error`` slot."""

	def __init__(self):
		self.loading: bool = False
		self.error: Optional[str] = None

	@asynccontextmanager
	async def _operation(
		self,
		action: str,
		raise_errors: bool = False,
		track_loading: bool = True,
	) -> AsyncIterator[None]:
		"""
		Run one store operation.

		Args:
			action: Human-readable verb phrase for the log line (e.g. "reordering activities")
			raise_errors: Re-raise after recording, for callers that must react (form submits)
			track_loading: Whether the operation toggles ``loading``
		"""
		if track_loading:
			self.loading = True
		self.error = None
		try:
			yield
		except (StoreError, ValueError) as e:
			logger.error(f"Error {action}: {e}")
			self.error = str(e)
			if raise_errors:
				raise
		finally:
			if track_loading:
				self.loading = False
