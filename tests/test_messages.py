"""Tests for the MessageStore: channels, messages, reactions, threads."""

import pytest

from marketing_planner.messages import ChannelCreate, Message, MessageCreate, MessageStore
from marketing_planner.persistence import MemoryPersistence

from .helpers import FailingPersistence

COMPANY = "3f2b8c1e-4d5a-4b6c-9e7f-0a1b2c3d4e5f"


@pytest.fixture
def persistence():
	return MemoryPersistence()


async def _store_with_channel(persistence) -> tuple[MessageStore, str]:
	store = MessageStore(persistence)
	channel = await store.create_channel(ChannelCreate(name="launch", company_id=COMPANY, members=["u1"]))
	await store.set_selected_channel(channel.id)
	return store, channel.id


class TestChannels:
	@pytest.mark.asyncio
	async def test_invalid_company_id(self, persistence):
		store = MessageStore(persistence)

		await store.fetch_channels("company1")
		assert store.error == "Invalid company ID format"

		created = await store.create_channel(ChannelCreate(name="x", company_id="nope"))
		assert created is None
		assert store.channels == []

	@pytest.mark.asyncio
	async def test_fetch_channels(self, persistence):
		await _store_with_channel(persistence)

		fresh = MessageStore(persistence)
		await fresh.fetch_channels(COMPANY)
		assert [c.name for c in fresh.channels] == ["launch"]
		assert fresh.error is None

	@pytest.mark.asyncio
	async def test_join_and_leave(self, persistence):
		store, channel_id = await _store_with_channel(persistence)

		await store.join_channel(channel_id, "u2")
		await store.join_channel(channel_id, "u2")
		assert store.get_channel(channel_id).members == ["u1", "u2"]

		await store.leave_channel(channel_id, "u1")
		assert store.get_channel(channel_id).members == ["u2"]

		await store.join_channel("missing", "u3")
		assert store.error is None

	@pytest.mark.asyncio
	async def test_delete_selected_channel(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		assert store.selected_channel.id == channel_id

		await store.delete_channel(channel_id)
		assert store.selected_channel is None
		assert store.channels == []


class TestMessages:
	@pytest.mark.asyncio
	async def test_send_and_fetch(self, persistence):
		store, channel_id = await _store_with_channel(persistence)

		sent = await store.send_message(MessageCreate(content="Kickoff", sender_id="u1", channel_id=channel_id))
		await store.send_message(MessageCreate(sender_id="u1", channel_id=channel_id, activity_ids=["act-1"]))

		fresh = MessageStore(persistence)
		await fresh.fetch_messages(channel_id)
		assert [m.content for m in fresh.messages] == ["Kickoff", ""]
		assert fresh.messages[0].id == sent.id

	@pytest.mark.asyncio
	async def test_empty_message_rejected(self, persistence):
		store, channel_id = await _store_with_channel(persistence)

		result = await store.send_message(MessageCreate(content="   ", sender_id="u1", channel_id=channel_id))

		assert result is None
		assert store.error.startswith("Message needs content")
		assert store.messages == []

	@pytest.mark.asyncio
	async def test_attachment_only_message_allowed(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		sent = await store.send_message(MessageCreate(sender_id="u1", channel_id=channel_id, attachments=["brief.pdf"]))
		assert sent is not None

	@pytest.mark.asyncio
	async def test_edit_and_delete(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		sent = await store.send_message(MessageCreate(content="Draft", sender_id="u1", channel_id=channel_id))

		await store.edit_message(sent.id, "Final")
		edited = store.get_message(sent.id)
		assert edited.content == "Final"
		assert edited.edited is True

		await store.delete_message(sent.id)
		assert store.get_message(sent.id) is None

	@pytest.mark.asyncio
	async def test_send_failure_keeps_cache(self):
		persistence = FailingPersistence()
		store, channel_id = await _store_with_channel(persistence)
		persistence.fail_on = {"insert"}

		await store.send_message(MessageCreate(content="Hi", sender_id="u1", channel_id=channel_id))

		assert store.error == "insert failed on messages"
		assert store.messages == []


class TestReactionsAndPins:
	@pytest.mark.asyncio
	async def test_reactions(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		sent = await store.send_message(MessageCreate(content="Ship?", sender_id="u1", channel_id=channel_id))

		await store.add_reaction(sent.id, "+1", "u1")
		await store.add_reaction(sent.id, "+1", "u1")
		await store.add_reaction(sent.id, "+1", "u2")
		reactions = store.get_message(sent.id).reactions
		assert [(r.emoji, r.users) for r in reactions] == [("+1", ["u1", "u2"])]

		await store.remove_reaction(sent.id, "+1", "u1")
		await store.remove_reaction(sent.id, "+1", "u2")
		assert store.get_message(sent.id).reactions == []

		rows = await persistence.select("messages", {"id": sent.id})
		assert rows[0]["reactions"] == []

	@pytest.mark.asyncio
	async def test_pin_and_unpin(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		sent = await store.send_message(MessageCreate(content="Brief", sender_id="u1", channel_id=channel_id))

		await store.pin_message(sent.id)
		assert [m.id for m in store.pinned_messages] == [sent.id]
		assert store.get_message(sent.id).pinned is True

		await store.unpin_message(sent.id)
		assert store.pinned_messages == []
		assert store.get_message(sent.id).pinned is False


class TestThreadsAndSearch:
	@pytest.mark.asyncio
	async def test_thread_replies_stay_out_of_channel(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		parent = await store.send_message(MessageCreate(content="Question", sender_id="u1", channel_id=channel_id))

		await store.fetch_thread(parent.id)
		reply = await store.send_thread_reply(
			parent.id, MessageCreate(content="Answer", sender_id="u2", channel_id=channel_id),
		)

		assert reply.thread_id == parent.id
		assert [m.content for m in store.selected_thread.messages] == ["Answer"]

		await store.fetch_messages(channel_id)
		assert [m.content for m in store.messages] == ["Question"]

		thread = await store.fetch_thread(parent.id)
		assert [m.id for m in thread.messages] == [reply.id]

	@pytest.mark.asyncio
	async def test_search_is_case_insensitive(self, persistence):
		store, channel_id = await _store_with_channel(persistence)
		await store.send_message(MessageCreate(content="Landing PAGE copy", sender_id="u1", channel_id=channel_id))
		await store.send_message(MessageCreate(content="Budget", sender_id="u1", channel_id=channel_id))

		await store.search_messages("page")
		assert [m.content for m in store.search_results] == ["Landing PAGE copy"]

		await store.search_messages("  ")
		assert store.search_results == []


class TestUnread:
	@pytest.mark.asyncio
	async def test_receive_marks_other_channels_unread(self, persistence):
		store, channel_id = await _store_with_channel(persistence)

		store.receive_message(Message(id="m1", content="hi", sender_id="u2", channel_id=channel_id))
		assert store.unread_channels == set()

		store.receive_message(Message(id="m2", content="hi", sender_id="u2", channel_id="elsewhere"))
		assert store.unread_channels == {"elsewhere"}

		store.mark_channel_as_read("elsewhere")
		assert store.unread_channels == set()
