"""Notifications module - per-user notifications and delivery preferences."""

from .models import (
	DigestFrequency,
	Notification,
	NotificationCreate,
	NotificationPreference,
	NotificationType,
)
from .store import NotificationStore

__all__ = [
	"DigestFrequency",
	"Notification",
	"NotificationCreate",
	"NotificationPreference",
	"NotificationStore",
	"NotificationType",
]
