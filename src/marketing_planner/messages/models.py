"""Message Models - channels and messages for plan discussions."""

from typing import Optional

from pydantic import BaseModel, Field

from ..state import now_iso


class Reaction(BaseModel):
	emoji: str
	users: list[str] = Field(default_factory=list)


class Message(BaseModel):
	"""A chat message; may reference plan activities and list attachments."""
	id: str
	content: str = Field(default="")
	sender_id: str
	channel_id: str
	attachments: list[str] = Field(default_factory=list, description="Attached file names or URLs")
	activity_ids: list[str] = Field(default_factory=list, description="Referenced plan activities")
	reactions: list[Reaction] = Field(default_factory=list)
	thread_id: Optional[str] = Field(default=None, description="Parent message when this is a thread reply")
	edited: bool = False
	pinned: bool = False
	mentions: list[str] = Field(default_factory=list)
	created_at: str = Field(default_factory=now_iso)


class MessageCreate(BaseModel):
	content: str = ""
	sender_id: str
	channel_id: str
	attachments: list[str] = Field(default_factory=list)
	activity_ids: list[str] = Field(default_factory=list)
	mentions: list[str] = Field(default_factory=list)

	def is_empty(self) -> bool:
		return not self.content.strip() and not self.activity_ids and not self.attachments


class Channel(BaseModel):
	id: str
	name: str
	description: Optional[str] = None
	company_id: str
	created_by: str = ""
	is_private: bool = False
	members: list[str] = Field(default_factory=list)
	created_at: str = Field(default_factory=now_iso)


class ChannelCreate(BaseModel):
	name: str
	description: Optional[str] = None
	company_id: str
	created_by: str = ""
	is_private: bool = False
	members: list[str] = Field(default_factory=list)


class Thread(BaseModel):
	"""Replies hanging off one parent message."""
	id: str
	parent_message_id: str
	messages: list[Message] = Field(default_factory=list)
