"""Per-process readers.

A reader turns one pid into a ProcessSample or raises ProcessReadError. Readers
hold no per-call state and are called concurrently from the collector's
worker threads.
"""

import os
import threading
from collections.abc import Callable, Iterable
from typing import Protocol

import psutil

from proclite.config import ExporterConfig
from proclite.models import ProcessSample
from proclite.procfs import (
    parse_cmdline,
    parse_io,
    parse_net_dev,
    parse_stat,
    parse_status_rss,
    pid_path,
    split_command,
)

# Anything a vanished, forbidden or garbled process can raise while being read
READ_ERRORS = (OSError, ValueError, IndexError, psutil.Error)


class ProcessReadError(Exception):
    """A single process could not be sampled."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"pid {pid}: {reason}")
        self.pid = pid
        self.reason = reason


class ProcessReader(Protocol):
    def read(self, pid: int) -> ProcessSample: ...


def read_network_counters(proc_root: str, pid: int) -> tuple[int, int]:
    """Bytes received and transmitted in the network namespace of pid."""
    with open(pid_path(proc_root, pid, "net", "dev"), errors="replace") as f:
        return parse_net_dev(f.read())


class ProcfsReader:
    """Reads counters straight from the pseudo-files under proc_root."""

    def __init__(self, proc_root: str = "/proc", clock_ticks: int | None = None) -> None:
        self.proc_root = proc_root
        self.clock_ticks = clock_ticks or os.sysconf("SC_CLK_TCK")

    def read(self, pid: int) -> ProcessSample:
        try:
            return self._read(pid)
        except READ_ERRORS as exc:
            raise ProcessReadError(pid, f"{type(exc).__name__}: {exc}") from exc

    def _read(self, pid: int) -> ProcessSample:
        with open(pid_path(self.proc_root, pid, "cmdline"), "rb") as f:
            argv = parse_cmdline(f.read())
        short_name, utime, stime = parse_stat(self._read_text(pid, "stat"))
        command, args = split_command(argv, short_name)
        memory_rss = parse_status_rss(self._read_text(pid, "status"))
        read_bytes, write_bytes = parse_io(self._read_text(pid, "io"))
        received, transmitted = read_network_counters(self.proc_root, pid)

        return ProcessSample(
            pid=pid,
            command=command,
            args=args,
            cpu_seconds=(utime + stime) / self.clock_ticks,
            memory_rss=memory_rss,
            disk_read_bytes=read_bytes,
            disk_write_bytes=write_bytes,
            network_receive_bytes=received,
            network_transmit_bytes=transmitted,
        )

    def _read_text(self, pid: int, name: str) -> str:
        with open(pid_path(self.proc_root, pid, name), errors="replace") as f:
            return f.read()


class ProcessHandleCache:
    """
    psutil.Process handles keyed by pid, shared by all worker threads.

    A pid reused by a new process keeps its old handle until it is evicted;
    counters read through it then belong to the new process.
    """

    def __init__(self) -> None:
        self._handles: dict[int, psutil.Process] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)

    def __contains__(self, pid: int) -> bool:
        with self._lock:
            return pid in self._handles

    def get(self, pid: int, factory: Callable[[int], psutil.Process]) -> psutil.Process:
        with self._lock:
            handle = self._handles.get(pid)
        if handle is not None:
            return handle

        # Created outside the lock; a concurrent miss for the same pid keeps the first
        handle = factory(pid)
        with self._lock:
            return self._handles.setdefault(pid, handle)

    def retain(self, pids: Iterable[int]) -> None:
        """Drop handles for pids that are no longer running."""
        live = set(pids)
        with self._lock:
            for pid in [pid for pid in self._handles if pid not in live]:
                del self._handles[pid]


class PsutilReader:
    """Reads counters through psutil, caching one Process handle per pid."""

    def __init__(self, proc_root: str = "/proc", cache: ProcessHandleCache | None = None) -> None:
        self.proc_root = proc_root
        self.cache = cache if cache is not None else ProcessHandleCache()
        psutil.PROCFS_PATH = proc_root

    def read(self, pid: int) -> ProcessSample:
        try:
            return self._read(pid)
        except READ_ERRORS as exc:
            raise ProcessReadError(pid, f"{type(exc).__name__}: {exc}") from exc

    def _read(self, pid: int) -> ProcessSample:
        proc = self.cache.get(pid, psutil.Process)

        with proc.oneshot():
            command, args = split_command(proc.cmdline(), proc.name())
            cpu = proc.cpu_times()
            memory_rss = proc.memory_info().rss
            io = proc.io_counters()
        received, transmitted = read_network_counters(self.proc_root, pid)

        return ProcessSample(
            pid=pid,
            command=command,
            args=args,
            cpu_seconds=cpu.user + cpu.system,
            memory_rss=memory_rss,
            disk_read_bytes=io.read_bytes,
            disk_write_bytes=io.write_bytes,
            network_receive_bytes=received,
            network_transmit_bytes=transmitted,
        )


def build_reader(config: ExporterConfig) -> ProcessReader:
    """Create the reader selected by config.reader."""
    if config.reader == "procfs":
        return ProcfsReader(config.proc_mount)
    return PsutilReader(config.proc_mount)
