"""Tests for the NotificationStore: notifications, read state, preferences."""

import pytest

from marketing_planner.notifications import (
	DigestFrequency,
	Notification,
	NotificationCreate,
	NotificationStore,
	NotificationType,
)
from marketing_planner.persistence import MemoryPersistence

from .helpers import FailingPersistence


@pytest.fixture
def persistence():
	return MemoryPersistence()


async def _store_with_notifications(persistence) -> NotificationStore:
	store = NotificationStore(persistence)
	await store.create_notification(NotificationCreate(
		user_id="u1", type=NotificationType.ACTIVITY_ASSIGNED, title="You own the launch email",
	))
	await store.create_notification(NotificationCreate(
		user_id="u1", type=NotificationType.TASK_DUE, title="Brief due tomorrow",
	))
	await store.create_notification(NotificationCreate(
		user_id="u2", type=NotificationType.CHANNEL_MESSAGE, title="New message in #launch",
	))
	return store


class TestNotifications:
	@pytest.mark.asyncio
	async def test_fetch_newest_first_per_user(self, persistence):
		await _store_with_notifications(persistence)

		store = NotificationStore(persistence)
		await store.fetch_notifications("u1")
		assert {n.title for n in store.notifications} == {"Brief due tomorrow", "You own the launch email"}
		stamps = [n.created_at for n in store.notifications]
		assert stamps == sorted(stamps, reverse=True)
		assert store.unread_count == 2

	@pytest.mark.asyncio
	async def test_mark_as_read(self, persistence):
		store = await _store_with_notifications(persistence)
		target = store.notifications[0]

		await store.mark_as_read(target.id)
		assert store.get_notification(target.id).read is True
		assert store.unread_count == 2

		fresh = NotificationStore(persistence)
		await fresh.fetch_notifications()
		assert fresh.get_notification(target.id).read is True

	@pytest.mark.asyncio
	async def test_mark_all_as_read_for_one_user(self, persistence):
		store = await _store_with_notifications(persistence)

		await store.mark_all_as_read("u1")
		assert [n.user_id for n in store.notifications if not n.read] == ["u2"]

		fresh = NotificationStore(persistence)
		await fresh.fetch_notifications("u1")
		assert fresh.unread_count == 0

	@pytest.mark.asyncio
	async def test_delete_and_clear(self, persistence):
		store = await _store_with_notifications(persistence)

		mine = next(n for n in store.notifications if n.user_id == "u1")
		await store.delete_notification(mine.id)
		assert len(store.notifications) == 2

		await store.clear_all_notifications("u1")
		assert [n.user_id for n in store.notifications] == ["u2"]

		await store.clear_all_notifications()
		assert store.notifications == []
		assert await persistence.select("notifications") == []

	@pytest.mark.asyncio
	async def test_receive_notification_once(self, persistence):
		store = await _store_with_notifications(persistence)
		incoming = Notification(id="n-push", user_id="u1", type=NotificationType.DIRECT_MESSAGE, title="Ping")

		store.receive_notification(incoming)
		store.receive_notification(incoming)

		assert store.notifications[0].id == "n-push"
		assert len([n for n in store.notifications if n.id == "n-push"]) == 1
		assert store.unread_count == 4

	@pytest.mark.asyncio
	async def test_failed_mark_keeps_unread(self):
		persistence = FailingPersistence()
		store = await _store_with_notifications(persistence)
		persistence.fail_on = {"update"}

		await store.mark_all_as_read()

		assert store.error == "update failed on notifications"
		assert store.unread_count == 3


class TestPreferences:
	@pytest.mark.asyncio
	async def test_defaults_cover_every_type_once(self, persistence):
		store = NotificationStore(persistence)

		await store.create_default_preferences("u1")
		await store.create_default_preferences("u1")

		fresh = NotificationStore(persistence)
		await fresh.fetch_preferences("u1")
		assert sorted(p.type.value for p in fresh.preferences) == sorted(t.value for t in NotificationType)
		assert all(p.in_app_enabled for p in fresh.preferences)

	@pytest.mark.asyncio
	async def test_update_preference(self, persistence):
		store = NotificationStore(persistence)
		await store.create_default_preferences("u1")
		await store.create_default_preferences("u2")

		await store.update_preference(
			NotificationType.TASK_DUE,
			{"email_enabled": False, "email_digest_frequency": "weekly", "user_id": "someone-else"},
			user_id="u1",
		)

		mine = store.get_preference(NotificationType.TASK_DUE, "u1")
		assert mine.email_enabled is False
		assert mine.email_digest_frequency == DigestFrequency.WEEKLY
		assert mine.user_id == "u1"
		assert store.get_preference(NotificationType.TASK_DUE, "u2").email_enabled is True

		fresh = NotificationStore(persistence)
		await fresh.fetch_preferences("u1")
		assert fresh.get_preference(NotificationType.TASK_DUE).email_enabled is False

	@pytest.mark.asyncio
	async def test_update_unknown_preference(self, persistence):
		store = NotificationStore(persistence)
		await store.update_preference(NotificationType.TASK_DUE, {"push_enabled": False})
		assert store.error == "Notification preference not found"
