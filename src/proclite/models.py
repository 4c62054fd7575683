"""Data models for proclite."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Immutable sample of one process's resource counters."""

    pid: int
    command: str
    args: str
    cpu_seconds: float  # (utime + stime) / CLK_TCK, cumulative
    memory_rss: int  # Bytes
    disk_read_bytes: int
    disk_write_bytes: int
    network_receive_bytes: int
    network_transmit_bytes: int


@dataclass(slots=True, frozen=True)
class SampleResult:
    """Outcome of reading one process: a sample, or the reason it was skipped."""

    pid: int
    sample: ProcessSample | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.sample is not None

    @classmethod
    def success(cls, sample: ProcessSample) -> SampleResult:
        return cls(pid=sample.pid, sample=sample)

    @classmethod
    def skipped(cls, pid: int, reason: str) -> SampleResult:
        return cls(pid=pid, reason=reason)
