"""Snapshot store holding the most recently published exposition document."""

import threading
import time
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Snapshot:
    """A fully rendered document and when it was published."""

    document: str = ""
    generation: int = 0  # 0 until the first publish
    published_at: float | None = None


class SnapshotStore:
    """
    One writer, many readers.

    A published document is wrapped in an immutable Snapshot and swapped in
    under a lock, so a reader gets either the previous document or the new
    one in full. The lock is held only for the reference swap.
    """

    def __init__(self) -> None:
        self._snapshot = Snapshot()
        self._lock = threading.Lock()

    def publish(self, document: str) -> Snapshot:
        """Replace the visible document."""
        with self._lock:
            self._snapshot = Snapshot(
                document=document,
                generation=self._snapshot.generation + 1,
                published_at=time.time(),
            )
            return self._snapshot

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._snapshot

    def read(self) -> str:
        """Current document, or an empty string before the first publish."""
        return self.snapshot().document
