"""
Notification Store - a user's notifications and delivery preferences.

Notifications are listed newest first. ``unread_count`` is derived from the
cached list rather than kept as a separate counter. Push delivery is outside
this store; ``receive_notification`` takes notifications arriving from
elsewhere.
"""

import logging
from typing import Any, Optional

from ..errors import NotFoundError
from ..persistence import Persistence
from ..state import StoreState, new_id, now_iso
from .models import Notification, NotificationCreate, NotificationPreference, NotificationType

logger = logging.getLogger(__name__)

NOTIFICATIONS = "notifications"
PREFERENCES = "notification_preferences"

PREFERENCE_FIELDS = (
	"email_enabled",
	"push_enabled",
	"in_app_enabled",
	"email_digest_enabled",
	"email_digest_frequency",
)


class NotificationStore(StoreState):
	"""In-memory cache of notifications and notification preferences."""

	def __init__(self, persistence: Persistence):
		super().__init__()
		self.persistence = persistence
		self.preferences: list[NotificationPreference] = []
		self.notifications: list[Notification] = []

	@property
	def unread_count(self) -> int:
		return len([n for n in self.notifications if not n.read])

	def get_notification(self, notification_id: str) -> Optional[Notification]:
		return next((n for n in self.notifications if n.id == notification_id), None)

	def get_preference(self, notification_type: NotificationType, user_id: Optional[str] = None) -> Optional[NotificationPreference]:
		return next(
			(p for p in self.preferences if p.type == notification_type and (user_id is None or p.user_id == user_id)),
			None,
		)

	# -- preferences --------------------------------------------------------

	async def fetch_preferences(self, user_id: Optional[str] = None) -> None:
		async with self._operation("fetching notification preferences"):
			filters = {"user_id": user_id} if user_id else None
			rows = await self.persistence.select(PREFERENCES, filters, order_by="created_at")
			self.preferences = [NotificationPreference(**row) for row in rows]

	async def create_default_preferences(self, user_id: str) -> None:
		"""Insert an all-enabled preference for every type the user has none for."""
		async with self._operation("creating notification preferences"):
			existing = await self.persistence.select(PREFERENCES, {"user_id": user_id})
			known = {row["type"] for row in existing}
			created = []
			for notification_type in NotificationType:
				if notification_type.value in known:
					continue
				preference = NotificationPreference(id=new_id(), user_id=user_id, type=notification_type)
				row = await self.persistence.insert(PREFERENCES, preference.model_dump(mode="json"))
				created.append(NotificationPreference(**row))
			self.preferences = [*self.preferences, *created]
			logger.debug(f"Created {len(created)} notification preferences for {user_id}")

	async def update_preference(
		self,
		notification_type: NotificationType,
		updates: dict[str, Any],
		user_id: Optional[str] = None,
	) -> None:
		"""Change delivery settings for one notification type (for one user, when given)."""
		async with self._operation("updating notification preference"):
			preference = self.get_preference(notification_type, user_id)
			if preference is None:
				raise NotFoundError("Notification preference not found")
			updates = {k: v for k, v in updates.items() if k in PREFERENCE_FIELDS}
			updated = NotificationPreference.model_validate({
				**preference.model_dump(), **updates, "updated_at": now_iso(),
			})
			fields = {k: getattr(updated, k) for k in [*updates, "updated_at"]}

			filters: dict[str, Any] = {"type": NotificationType(notification_type).value}
			if user_id:
				filters["user_id"] = user_id
			await self.persistence.update(PREFERENCES, filters, updated.model_dump(mode="json", include=set(fields)))

			self.preferences = [
				p.model_copy(update=fields)
				if p.type == notification_type and (user_id is None or p.user_id == user_id) else p
				for p in self.preferences
			]

	# -- notifications ------------------------------------------------------

	async def fetch_notifications(self, user_id: Optional[str] = None) -> None:
		async with self._operation("fetching notifications"):
			filters = {"user_id": user_id} if user_id else None
			rows = await self.persistence.select(NOTIFICATIONS, filters, order_by="created_at", ascending=False)
			self.notifications = [Notification(**row) for row in rows]
			logger.info(f"Loaded {len(self.notifications)} notifications ({self.unread_count} unread)")

	async def create_notification(self, fields: NotificationCreate) -> Optional[Notification]:
		async with self._operation("creating notification", track_loading=False):
			notification = Notification(id=new_id(), **fields.model_dump())
			row = await self.persistence.insert(NOTIFICATIONS, notification.model_dump(mode="json"))
			created = Notification(**row)
			self.notifications = [created, *self.notifications]
			return created
		return None

	def receive_notification(self, notification: Notification) -> None:
		"""Put a notification delivered from elsewhere at the top of the list."""
		if self.get_notification(notification.id) is not None:
			return
		self.notifications = [notification, *self.notifications]

	async def mark_as_read(self, notification_id: str) -> None:
		async with self._operation("marking notification read", track_loading=False):
			await self.persistence.update(NOTIFICATIONS, {"id": notification_id}, {"read": True})
			self.notifications = [
				n.model_copy(update={"read": True}) if n.id == notification_id else n
				for n in self.notifications
			]

	async def mark_all_as_read(self, user_id: Optional[str] = None) -> None:
		async with self._operation("marking all notifications read", track_loading=False):
			filters: dict[str, Any] = {"read": False}
			if user_id:
				filters["user_id"] = user_id
			count = await self.persistence.update(NOTIFICATIONS, filters, {"read": True})
			self.notifications = [
				n.model_copy(update={"read": True}) if user_id is None or n.user_id == user_id else n
				for n in self.notifications
			]
			logger.debug(f"Marked {count} notifications read")

	async def delete_notification(self, notification_id: str) -> None:
		async with self._operation("deleting notification", track_loading=False):
			await self.persistence.delete(NOTIFICATIONS, {"id": notification_id})
			self.notifications = [n for n in self.notifications if n.id != notification_id]

	async def clear_all_notifications(self, user_id: Optional[str] = None) -> None:
		async with self._operation("clearing notifications", track_loading=False):
			await self.persistence.delete(NOTIFICATIONS, {"user_id": user_id} if user_id else {})
			self.notifications = [n for n in self.notifications if user_id is not None and n.user_id != user_id]
