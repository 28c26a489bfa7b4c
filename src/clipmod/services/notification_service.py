import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ulid import ULID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryChanged:
    """The history gained an entry; observers should re-read the store."""


@dataclass(frozen=True)
class SubscriptionHandle:
    subscription_id: str


Observer = Callable[[HistoryChanged], None]


class NotificationBus:
    """Synchronous in-process publish/subscribe for history changes.

    Observers run on the publishing thread. An observer that raises is
    logged and skipped; the error never reaches the publisher.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: Dict[str, Observer] = {}

    def subscribe(self, observer: Observer) -> SubscriptionHandle:
        if not callable(observer):
            raise TypeError("observer must be callable")

        handle = SubscriptionHandle(subscription_id=f"s_{ULID()}")
        with self._lock:
            self._observers[handle.subscription_id] = observer
        logger.debug(f"Subscribed observer {handle.subscription_id}")
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> bool:
        with self._lock:
            removed = self._observers.pop(handle.subscription_id, None)
        if removed is not None:
            logger.debug(f"Unsubscribed observer {handle.subscription_id}")
        return removed is not None

    def publish(self, event: Optional[HistoryChanged] = None) -> int:
        if event is None:
            event = HistoryChanged()
        with self._lock:
            observers = list(self._observers.items())

        delivered = 0
        for subscription_id, observer in observers:
            try:
                observer(event)
                delivered += 1
            except Exception:
                logger.exception(f"Observer {subscription_id} failed")
        return delivered

    def close(self) -> None:
        with self._lock:
            count = len(self._observers)
            self._observers.clear()
        if count:
            logger.debug(f"Dropped {count} subscription(s)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)
