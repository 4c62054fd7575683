"""Shared fixtures: a fake procfs tree built under tmp_path."""

from pathlib import Path

import pytest

from proclite.models import ProcessSample

NET_DEV_HEADER = (
    "Inter-|   Receive                                                |  Transmit\n"
    " face |bytes    packets errs drop fifo frame compressed multicast|"
    "bytes    packets errs drop fifo colls carrier compressed\n"
)


def net_dev_row(name: str, rx: int, tx: int) -> str:
    return f"{name:>6}: {rx} 10 0 0 0 0 0 0 {tx} 20 0 0 0 0 0 0\n"


def make_sample(pid: int = 123, **overrides) -> ProcessSample:
    fields = dict(
        pid=pid,
        command="nginx",
        args="-g daemon off;",
        cpu_seconds=12.5,
        memory_rss=1024000,
        disk_read_bytes=4096,
        disk_write_bytes=8192,
        network_receive_bytes=1500,
        network_transmit_bytes=900,
    )
    fields.update(overrides)
    return ProcessSample(**fields)


class FakeProc:
    """Builds /proc/<pid>/ pseudo-files for tests."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def add_process(
        self,
        pid: int,
        cmdline: bytes = b"/usr/bin/sleep\x0060\x00",
        comm: str = "sleep",
        utime: int = 250,
        stime: int = 50,
        rss_kb: int | None = 2048,
        read_bytes: int = 4096,
        write_bytes: int = 8192,
        interfaces: tuple[tuple[str, int, int], ...] = (("lo", 100, 100), ("eth0", 1500, 700)),
    ) -> Path:
        proc_dir = self.root / str(pid)
        (proc_dir / "net").mkdir(parents=True)

        (proc_dir / "cmdline").write_bytes(cmdline)
        (proc_dir / "stat").write_text(
            f"{pid} ({comm}) S 1 {pid} {pid} 0 -1 4194560 120 0 0 0 "
            f"{utime} {stime} 0 0 20 0 1 0 4242 10485760 512 18446744073709551615\n"
        )
        status = f"Name:\t{comm}\nState:\tS (sleeping)\nPid:\t{pid}\n"
        if rss_kb is not None:
            status += f"VmRSS:\t{rss_kb:>8} kB\n"
        status += "Threads:\t1\n"
        (proc_dir / "status").write_text(status)
        (proc_dir / "io").write_text(
            "rchar: 1\nwchar: 2\nsyscr: 3\nsyscw: 4\n"
            f"read_bytes: {read_bytes}\nwrite_bytes: {write_bytes}\n"
            "cancelled_write_bytes: 0\n"
        )
        rows = "".join(net_dev_row(name, rx, tx) for name, rx, tx in interfaces)
        (proc_dir / "net" / "dev").write_text(NET_DEV_HEADER + rows)
        return proc_dir


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    """An empty fake procfs root."""
    root = tmp_path / "proc"
    root.mkdir()
    return FakeProc(root)
