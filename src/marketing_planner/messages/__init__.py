"""Messages module - channels and messages for plan discussions."""

from .models import Channel, ChannelCreate, Message, MessageCreate, Reaction, Thread
from .store import MessageStore

__all__ = [
	"Channel",
	"ChannelCreate",
	"Message",
	"MessageCreate",
	"MessageStore",
	"Reaction",
	"Thread",
]
