"""Notification Models - per-user notifications and delivery preferences."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..state import now_iso


class NotificationType(str, Enum):
	ACTIVITY_ASSIGNED = "activity_assigned"
	SUBTASK_ASSIGNED = "subtask_assigned"
	COMMENT_MENTION = "comment_mention"
	CHANNEL_MESSAGE = "channel_message"
	DIRECT_MESSAGE = "direct_message"
	TASK_DUE = "task_due"


class DigestFrequency(str, Enum):
	DAILY = "daily"
	WEEKLY = "weekly"


class NotificationPreference(BaseModel):
	"""How one user wants one kind of notification delivered."""
	id: str
	user_id: str
	type: NotificationType
	email_enabled: bool = True
	push_enabled: bool = True
	in_app_enabled: bool = True
	email_digest_enabled: bool = False
	email_digest_frequency: Optional[DigestFrequency] = None
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class Notification(BaseModel):
	id: str
	user_id: str
	type: NotificationType
	title: str
	content: str = ""
	link: Optional[str] = Field(default=None, description="Where the notification points (plan, channel...)")
	read: bool = False
	created_at: str = Field(default_factory=now_iso)


class NotificationCreate(BaseModel):
	user_id: str
	type: NotificationType
	title: str
	content: str = ""
	link: Optional[str] = None
