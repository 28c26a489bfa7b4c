import logging
import threading
import warnings
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from clipmod.database.history_file import HistoryFile
from clipmod.exceptions import HistoryFileError, PersistenceWarning
from clipmod.models.entry import ClipboardEntry, storable_text
from clipmod.services.notification_service import HistoryChanged, NotificationBus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HistoryStore:
    """Append-only clipboard history.

    Owns the in-memory sequence and is its only writer. A candidate equal to
    the most recent entry is dropped; older duplicates are not, so copying
    "A", "B", "A" records three entries. Every accepted entry is written to
    the history file and announced on the bus.
    """

    def __init__(
        self,
        history_file: HistoryFile,
        bus: Optional[NotificationBus] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.history_file = history_file
        self.bus = bus
        self._clock = clock or _utc_now
        self._lock = threading.RLock()
        self._entries: List[ClipboardEntry] = []
        self._snapshot: Tuple[ClipboardEntry, ...] = ()
        self.last_persist_error: Optional[Exception] = None

        self._entries = self.load()
        self._snapshot = tuple(self._entries)

    def load(self) -> List[ClipboardEntry]:
        try:
            entries = self.history_file.load()
        except HistoryFileError as e:
            logger.warning(f"Ignoring unreadable clipboard history: {e}")
            return []

        logger.info(f"Loaded {len(entries)} clipboard entries from {self.history_file.path}")
        return entries

    @property
    def entries(self) -> Tuple[ClipboardEntry, ...]:
        return self._snapshot

    @property
    def last(self) -> Optional[ClipboardEntry]:
        snapshot = self._snapshot
        return snapshot[-1] if snapshot else None

    def __len__(self) -> int:
        return len(self._snapshot)

    def record_if_changed(self, candidate: str) -> Optional[ClipboardEntry]:
        candidate = storable_text(candidate)
        with self._lock:
            last = self._entries[-1] if self._entries else None
            if last is not None and last.content == candidate:
                logger.debug("Clipboard unchanged, skipping")
                return None

            timestamp = self._clock()
            if timestamp.tzinfo is None:
                timestamp = timestamp.replace(tzinfo=timezone.utc)
            if last is not None and timestamp < last.timestamp:
                logger.error(
                    f"Refusing entry stamped {timestamp.isoformat()} before "
                    f"previous entry {last.timestamp.isoformat()}")
                return None

            entry = ClipboardEntry.create(candidate, timestamp)
            self._entries.append(entry)
            self._snapshot = tuple(self._entries)
            logger.info(f"Clipboard recorded: {len(candidate)} chars ({entry.hash[:12]})")

            persist_error = self._persist()

        if persist_error is not None:
            warnings.warn(
                f"Clipboard entry kept in memory only: {persist_error}",
                PersistenceWarning,
                stacklevel=2,
            )

        if self.bus is not None:
            self.bus.publish(HistoryChanged())

        return entry

    def flush(self) -> bool:
        with self._lock:
            return self._persist() is None

    def find(self, entry_hash: str) -> Optional[ClipboardEntry]:
        for entry in self._snapshot:
            if entry.hash == entry_hash:
                return entry
        return None

    def search(self, query: str) -> List[ClipboardEntry]:
        """Entries containing ``query`` (case-insensitive), newest first."""
        needle = query.casefold()
        return [
            entry for entry in reversed(self._snapshot)
            if needle in entry.content.casefold()
        ]

    def _persist(self) -> Optional[Exception]:
        try:
            self.history_file.save(self._snapshot)
        except (HistoryFileError, OSError) as e:
            logger.warning(f"Could not save clipboard history: {e}")
            self.last_persist_error = e
            return e

        self.last_persist_error = None
        return None
