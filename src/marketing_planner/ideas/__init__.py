"""Ideas module - the backlog of marketing ideas and their discussion."""

from .models import (
	AttachmentCreate,
	Idea,
	IdeaAttachment,
	IdeaComment,
	IdeaCreate,
	IdeaPriority,
	IdeaReference,
	IdeaStatus,
	IdeaType,
	ReferenceCreate,
)
from .store import IdeaStore

__all__ = [
	"AttachmentCreate",
	"Idea",
	"IdeaAttachment",
	"IdeaComment",
	"IdeaCreate",
	"IdeaPriority",
	"IdeaReference",
	"IdeaStatus",
	"IdeaStore",
	"IdeaType",
	"ReferenceCreate",
]
