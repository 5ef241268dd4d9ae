"""
Idea Models - Pydantic schemas for the ideas backlog.

An idea is a loose proposal (a blog topic, a campaign angle) that a team can
discuss and later attach to a marketing plan. Comments, attachments,
references and tags live on the idea row itself.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..state import now_iso


class IdeaType(str, Enum):
	BLOG = "blog"
	SOCIAL = "social"
	WEBSITE = "website"
	EMAIL = "email"
	OTHER = "other"


class IdeaPriority(str, Enum):
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"
	URGENT = "urgent"


class IdeaStatus(str, Enum):
	DRAFT = "draft"
	IN_REVIEW = "in_review"
	APPROVED = "approved"
	IN_PLAN = "in_plan"


class IdeaComment(BaseModel):
	id: str
	idea_id: str
	user_id: str
	content: str
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class IdeaAttachment(BaseModel):
	id: str
	idea_id: str
	file_name: str
	file_url: str = Field(description="Where the file is stored; nothing is uploaded here")
	file_type: str = ""
	created_at: str = Field(default_factory=now_iso)


class AttachmentCreate(BaseModel):
	file_name: str
	file_url: str
	file_type: str = ""


class IdeaReference(BaseModel):
	id: str
	idea_id: str
	title: str
	url: str
	description: Optional[str] = None
	created_at: str = Field(default_factory=now_iso)


class ReferenceCreate(BaseModel):
	title: str
	url: str
	description: Optional[str] = None


class Idea(BaseModel):
	"""A proposal in a company's backlog."""
	id: str = Field(description="Unique idea identifier")
	title: str
	description: str = ""
	type: IdeaType = IdeaType.OTHER
	priority: IdeaPriority = IdeaPriority.MEDIUM
	status: IdeaStatus = IdeaStatus.DRAFT
	created_by: str = ""
	company_id: str
	plan_id: Optional[str] = Field(default=None, description="Plan the idea was added to")
	comments: list[IdeaComment] = Field(default_factory=list)
	attachments: list[IdeaAttachment] = Field(default_factory=list)
	references: list[IdeaReference] = Field(default_factory=list)
	tags: list[str] = Field(default_factory=list)
	created_at: str = Field(default_factory=now_iso)
	updated_at: str = Field(default_factory=now_iso)


class IdeaCreate(BaseModel):
	"""Caller-supplied fields for a new idea; collections always start empty."""
	title: str
	description: str = ""
	type: IdeaType = IdeaType.OTHER
	priority: IdeaPriority = IdeaPriority.MEDIUM
	status: IdeaStatus = IdeaStatus.DRAFT
	created_by: str = ""
	company_id: str
