"""Service layer for clipmod."""

from .clipboard_service import ClipboardPoller, PollerState
from .history_service import HistoryStore
from .notification_service import HistoryChanged, NotificationBus, SubscriptionHandle
from .transform_service import TransformEngine

__all__ = [
    "ClipboardPoller",
    "PollerState",
    "HistoryStore",
    "HistoryChanged",
    "NotificationBus",
    "SubscriptionHandle",
    "TransformEngine",
]
