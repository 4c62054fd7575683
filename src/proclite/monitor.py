"""Background refresh loop for proclite."""

import logging
import threading

from proclite.collector import CollectionError, Collector
from proclite.store import SnapshotStore

logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.1


class RefreshLoop:
    """
    Refreshes the snapshot store from the collector on a fixed interval.

    Runs in a separate daemon thread. Cycles never overlap: the interval is
    the pause between the end of one cycle and the start of the next. A
    failed cycle is logged and leaves the previous snapshot in place.
    """

    def __init__(
        self,
        collector: Collector,
        store: SnapshotStore,
        interval: float = 15.0,
    ) -> None:
        """
        Initialize the RefreshLoop.

        Args:
            collector: Produces one exposition document per cycle.
            store: Receives every successfully collected document.
            interval: Seconds to wait between cycles. Default 15.0s.
        """
        self._collector = collector
        self._store = store
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """Seconds slept between the end of one cycle and the start of the next."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        self._interval = max(MIN_INTERVAL, value)

    @property
    def is_running(self) -> bool:
        """True while the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start refreshing in the background; a no-op if already running."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._refresh_loop,
            daemon=True,
            name="RefreshLoop",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the refresh thread.

        An in-flight cycle is not interrupted; stop returns after timeout
        even if that cycle is still running.

        Args:
            timeout: Seconds to wait for the thread to exit.
        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def run_once(self) -> bool:
        """Run one collection cycle and publish the result if it succeeded."""
        try:
            document = self._collector.collect()
        except CollectionError as exc:
            logger.error("Error collecting metrics: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected error collecting metrics")
            return False

        self._store.publish(document)
        return True

    def _refresh_loop(self) -> None:
        """Main refresh loop running in the background thread."""
        while not self._stop_event.is_set():
            self.run_once()

            # Gap runs from the end of this cycle; stop() cuts it short
            self._stop_event.wait(timeout=self._interval)
