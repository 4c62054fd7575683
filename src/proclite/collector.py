"""Collection cycle: enumerate processes, sample them in parallel, render."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from proclite.exposition import render_document
from proclite.models import SampleResult
from proclite.procfs import list_pids
from proclite.readers import ProcessReader, ProcessReadError

logger = logging.getLogger(__name__)


class CollectionError(Exception):
    """A whole collection cycle failed; the previous snapshot stays published."""


class Collector:
    """
    Runs one collection cycle per call to collect().

    Each cycle enumerates pids under proc_root, reads every process on a
    thread pool of at most max_workers threads and waits for all reads to
    finish. Processes that cannot be read are left out of the document;
    only a failure to enumerate fails the cycle.
    """

    def __init__(
        self,
        proc_root: str,
        reader: ProcessReader,
        max_workers: int = 32,
        enumerate_pids: Callable[[str], set[int]] = list_pids,
    ) -> None:
        self.proc_root = proc_root
        self.reader = reader
        self.max_workers = max_workers
        self._enumerate_pids = enumerate_pids

    def collect(self) -> str:
        """Run one cycle and return the rendered exposition document."""
        try:
            pids = self._enumerate_pids(self.proc_root)
        except OSError as exc:
            raise CollectionError(f"cannot list processes under {self.proc_root}: {exc}") from exc

        cache = getattr(self.reader, "cache", None)
        if cache is not None:
            cache.retain(pids)

        results = self.sample_all(pids)
        samples = sorted((r.sample for r in results if r.ok), key=lambda s: s.pid)

        logger.debug(
            "Sampled %d of %d processes (%d skipped)",
            len(samples),
            len(results),
            len(results) - len(samples),
        )
        return render_document(samples)

    def sample_all(self, pids: set[int]) -> list[SampleResult]:
        """Read every pid concurrently and return one result per pid."""
        if not pids:
            return []

        workers = min(self.max_workers, len(pids))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ProcessReader") as pool:
            return list(pool.map(self._sample, pids))

    def _sample(self, pid: int) -> SampleResult:
        try:
            return SampleResult.success(self.reader.read(pid))
        except ProcessReadError as exc:
            return SampleResult.skipped(pid, exc.reason)
