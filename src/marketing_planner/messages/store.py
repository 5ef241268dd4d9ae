"""
Message Store - channels, messages and threads.

Messages can point at plan activities (``activity_ids``) and carry attachment
references. Real-time delivery is outside this store; ``receive_message`` is
the entry point for messages arriving from elsewhere.
"""

import logging
import re
from typing import Any, Optional

from ..errors import NotFoundError
from ..persistence import Persistence
from ..state import StoreState, new_id, now_iso
from .models import Channel, ChannelCreate, Message, MessageCreate, Reaction, Thread

logger = logging.getLogger(__name__)

CHANNELS = "channels"
MESSAGES = "messages"

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def _check_company_id(company_id: str) -> None:
	if not UUID_RE.match(company_id or ""):
		raise ValueError("Invalid company ID format")


class MessageStore(StoreState):
	"""In-memory cache of channels and the selected channel's messages."""

	def __init__(self, persistence: Persistence):
		super().__init__()
		self.persistence = persistence
		self.channels: list[Channel] = []
		self.messages: list[Message] = []
		self.threads: list[Thread] = []
		self.search_results: list[Message] = []
		self.pinned_messages: list[Message] = []
		self.unread_channels: set[str] = set()
		self.selected_thread: Optional[Thread] = None
		self._selected_channel_id: Optional[str] = None

	@property
	def selected_channel(self) -> Optional[Channel]:
		if self._selected_channel_id is None:
			return None
		return self.get_channel(self._selected_channel_id)

	def get_channel(self, channel_id: str) -> Optional[Channel]:
		return next((c for c in self.channels if c.id == channel_id), None)

	def get_message(self, message_id: str) -> Optional[Message]:
		return next((m for m in self.messages if m.id == message_id), None)

	def _replace_message(self, updated: Message) -> None:
		self.messages = [updated if m.id == updated.id else m for m in self.messages]

	def _patch_message(self, message_id: str, fields: dict[str, Any]) -> Optional[Message]:
		"""Apply ``fields`` to the cached message as it is now; None when it is not cached."""
		message = self.get_message(message_id)
		if message is None:
			return None
		updated = message.model_copy(update=fields)
		self._replace_message(updated)
		return updated

	# -- channels -----------------------------------------------------------

	async def fetch_channels(self, company_id: str) -> None:
		async with self._operation("fetching channels"):
			_check_company_id(company_id)
			rows = await self.persistence.select(CHANNELS, {"company_id": company_id}, order_by="created_at")
			self.channels = [Channel(**row) for row in rows]

	async def create_channel(self, fields: ChannelCreate) -> Optional[Channel]:
		async with self._operation("creating channel"):
			_check_company_id(fields.company_id)
			channel = Channel(id=new_id(), created_at=now_iso(), **fields.model_dump())
			row = await self.persistence.insert(CHANNELS, channel.model_dump(mode="json"))
			created = Channel(**row)
			self.channels = [*self.channels, created]
			logger.info(f"Created channel {created.id} ({created.name})")
			return created
		return None

	async def update_channel(self, channel_id: str, updates: dict[str, Any]) -> None:
		async with self._operation("updating channel"):
			await self._write_channel(channel_id, updates)

	async def _write_channel(self, channel_id: str, updates: dict[str, Any]) -> None:
		updates = {k: v for k, v in updates.items() if k != "id"}
		await self.persistence.update(CHANNELS, {"id": channel_id}, updates)
		channel = self.get_channel(channel_id)
		if channel is not None:
			updated = Channel.model_validate({**channel.model_dump(), **updates})
			self.channels = [updated if c.id == channel_id else c for c in self.channels]

	async def delete_channel(self, channel_id: str) -> None:
		async with self._operation("deleting channel"):
			await self.persistence.delete(CHANNELS, {"id": channel_id})
			self.channels = [c for c in self.channels if c.id != channel_id]
			if self._selected_channel_id == channel_id:
				self._selected_channel_id = None

	async def join_channel(self, channel_id: str, user_id: str) -> None:
		channel = self.get_channel(channel_id)
		if channel is None or user_id in channel.members:
			return
		await self.update_channel(channel_id, {"members": [*channel.members, user_id]})

	async def leave_channel(self, channel_id: str, user_id: str) -> None:
		channel = self.get_channel(channel_id)
		if channel is None:
			return
		await self.update_channel(channel_id, {"members": [m for m in channel.members if m != user_id]})

	async def set_selected_channel(self, channel_id: Optional[str]) -> None:
		"""Select a channel, mark it read and load its messages."""
		self._selected_channel_id = channel_id
		if channel_id is not None:
			self.mark_channel_as_read(channel_id)
			await self.fetch_messages(channel_id)

	# -- messages -----------------------------------------------------------

	async def fetch_messages(self, channel_id: str) -> None:
		async with self._operation("fetching messages"):
			rows = await self.persistence.select(
				MESSAGES, {"channel_id": channel_id, "thread_id": None}, order_by="created_at",
			)
			self.messages = [Message(**row) for row in rows]

	async def send_message(self, fields: MessageCreate) -> Optional[Message]:
		"""Send a message; it needs text, an activity reference or an attachment."""
		async with self._operation("sending message"):
			if fields.is_empty():
				raise ValueError("Message needs content, an activity reference or an attachment")
			message = Message(id=new_id(), created_at=now_iso(), **fields.model_dump())
			row = await self.persistence.insert(MESSAGES, message.model_dump(mode="json"))
			created = Message(**row)
			self.messages = [*self.messages, created]
			return created
		return None

	async def edit_message(self, message_id: str, content: str) -> None:
		async with self._operation("editing message"):
			await self.persistence.update(MESSAGES, {"id": message_id}, {"content": content, "edited": True})
			self._patch_message(message_id, {"content": content, "edited": True})

	async def delete_message(self, message_id: str) -> None:
		async with self._operation("deleting message"):
			await self.persistence.delete(MESSAGES, {"id": message_id})
			self.messages = [m for m in self.messages if m.id != message_id]
			self.pinned_messages = [m for m in self.pinned_messages if m.id != message_id]

	def receive_message(self, message: Message) -> None:
		"""Take a message delivered from elsewhere; other channels become unread."""
		self.messages = [*self.messages, message]
		if message.channel_id != self._selected_channel_id:
			self.unread_channels = self.unread_channels | {message.channel_id}

	def mark_channel_as_read(self, channel_id: str) -> None:
		self.unread_channels = self.unread_channels - {channel_id}

	# -- reactions and pins -------------------------------------------------

	async def add_reaction(self, message_id: str, emoji: str, user_id: str) -> None:
		message = self.get_message(message_id)
		if message is None:
			return

		existing = next((r for r in message.reactions if r.emoji == emoji), None)
		if existing is not None and user_id in existing.users:
			return
		if existing is not None:
			reactions = [
				Reaction(emoji=r.emoji, users=[*r.users, user_id]) if r.emoji == emoji else r
				for r in message.reactions
			]
		else:
			reactions = [*message.reactions, Reaction(emoji=emoji, users=[user_id])]

		await self._write_reactions(message, reactions)

	async def remove_reaction(self, message_id: str, emoji: str, user_id: str) -> None:
		message = self.get_message(message_id)
		if message is None or not message.reactions:
			return

		reactions = []
		for r in message.reactions:
			if r.emoji == emoji:
				users = [u for u in r.users if u != user_id]
				if users:
					reactions.append(Reaction(emoji=r.emoji, users=users))
			else:
				reactions.append(r)

		await self._write_reactions(message, reactions)

	async def _write_reactions(self, message: Message, reactions: list[Reaction]) -> None:
		async with self._operation("updating reactions", track_loading=False):
			await self.persistence.update(
				MESSAGES, {"id": message.id},
				{"reactions": [r.model_dump() for r in reactions]},
			)
			self._patch_message(message.id, {"reactions": reactions})

	async def pin_message(self, message_id: str) -> None:
		async with self._operation("pinning message", track_loading=False):
			message = self.get_message(message_id)
			if message is None:
				raise NotFoundError("Message not found")
			await self.persistence.update(MESSAGES, {"id": message_id}, {"pinned": True})
			pinned = self._patch_message(message_id, {"pinned": True}) or message.model_copy(update={"pinned": True})
			self.pinned_messages = [*[m for m in self.pinned_messages if m.id != message_id], pinned]

	async def unpin_message(self, message_id: str) -> None:
		async with self._operation("unpinning message", track_loading=False):
			await self.persistence.update(MESSAGES, {"id": message_id}, {"pinned": False})
			self._patch_message(message_id, {"pinned": False})
			self.pinned_messages = [m for m in self.pinned_messages if m.id != message_id]

	# -- threads ------------------------------------------------------------

	async def fetch_thread(self, message_id: str) -> Optional[Thread]:
		async with self._operation("fetching thread"):
			rows = await self.persistence.select(MESSAGES, {"thread_id": message_id}, order_by="created_at")
			thread = Thread(
				id=message_id,
				parent_message_id=message_id,
				messages=[Message(**row) for row in rows],
			)
			self.threads = [*[t for t in self.threads if t.id != message_id], thread]
			self.selected_thread = thread
			return thread
		return None

	async def send_thread_reply(self, thread_id: str, fields: MessageCreate) -> Optional[Message]:
		async with self._operation("sending thread reply", track_loading=False):
			if fields.is_empty():
				raise ValueError("Message needs content, an activity reference or an attachment")
			reply = Message(id=new_id(), created_at=now_iso(), thread_id=thread_id, **fields.model_dump())
			row = await self.persistence.insert(MESSAGES, reply.model_dump(mode="json"))
			created = Message(**row)
			self.threads = [
				t.model_copy(update={"messages": [*t.messages, created]}) if t.id == thread_id else t
				for t in self.threads
			]
			if self.selected_thread is not None and self.selected_thread.id == thread_id:
				self.selected_thread = next(t for t in self.threads if t.id == thread_id)
			return created
		return None

	# -- search -------------------------------------------------------------

	async def search_messages(self, query: str) -> None:
		"""Case-insensitive substring search over every stored message."""
		async with self._operation("searching messages"):
			needle = query.strip().lower()
			rows = await self.persistence.select(MESSAGES, order_by="created_at")
			self.search_results = [
				Message(**row) for row in rows
				if needle and needle in row.get("content", "").lower()
			]
			logger.debug(f"Search for '{query}' matched {len(self.search_results)} messages")
