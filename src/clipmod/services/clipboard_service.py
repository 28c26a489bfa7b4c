import logging
import threading
from enum import Enum
from typing import Optional

from clipmod.clipboard.base import ClipboardSource
from clipmod.config import DEFAULT_POLL_INTERVAL
from clipmod.models.entry import ClipboardEntry
from clipmod.services.history_service import HistoryStore

logger = logging.getLogger(__name__)


class PollerState(Enum):
    IDLE = "idle"
    SAMPLING = "sampling"


class ClipboardPoller:
    """Samples the clipboard on a fixed interval and feeds the history store.

    Holds no history itself. ``stop`` waits for an in-flight tick and then
    flushes the store, so the last sampled value is on disk before it returns.
    A ``start`` or ``stop`` issued while another ``stop`` is still finishing
    waits for it.
    """

    def __init__(
        self,
        source: ClipboardSource,
        store: HistoryStore,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.source = source
        self.store = store
        self.poll_interval = poll_interval
        self.tick_count = 0
        self._state = PollerState.IDLE
        self._lifecycle = threading.Condition(threading.Lock())
        self._tick_lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._poll_thread: Optional[threading.Thread] = None
        self._is_running = False
        self._is_stopping = False

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._is_running

    def start(self) -> None:
        with self._lifecycle:
            while self._is_stopping:
                self._lifecycle.wait()

            if self._is_running:
                return

            # each thread gets its own event so a restart cannot revive a stopping loop
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._is_running = True
            self._poll_thread = threading.Thread(
                target=self._poll_loop, args=(stop_event,),
                name="clipboard-poller", daemon=True)
            self._poll_thread.start()
            logger.info(f"Polling clipboard every {self.poll_interval}s")

    def stop(self) -> None:
        current = threading.current_thread()

        with self._lifecycle:
            if self._is_stopping:
                # the poll thread must not wait on a stopper that is joining it
                if self._poll_thread is current:
                    return
                while self._is_stopping:
                    self._lifecycle.wait()
                return

            if not self._is_running:
                return

            self._is_running = False
            self._is_stopping = True
            self._stop_event.set()
            poll_thread = self._poll_thread

        try:
            if poll_thread is not None and poll_thread is not current:
                poll_thread.join()

            if not self.store.flush():
                logger.warning("Final history flush failed")
        finally:
            with self._lifecycle:
                self._poll_thread = None
                self._is_stopping = False
                self._lifecycle.notify_all()
        logger.info("Clipboard polling stopped")

    def tick(self) -> Optional[ClipboardEntry]:
        with self._tick_lock:
            self._state = PollerState.SAMPLING
            try:
                return self._sample()
            finally:
                self.tick_count += 1
                self._state = PollerState.IDLE

    def _sample(self) -> Optional[ClipboardEntry]:
        try:
            text = self.source.read()
        except Exception as e:
            logger.warning(f"Clipboard read failed, skipping tick: {e}")
            return None

        if text is None:
            return None

        try:
            return self.store.record_if_changed(text)
        except Exception as e:
            logger.error(f"Error recording clipboard: {e}")
            return None

    def _poll_loop(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self.tick()
            stop_event.wait(self.poll_interval)

    def __enter__(self) -> "ClipboardPoller":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
