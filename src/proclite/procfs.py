"""Process enumeration and pseudo-file parsers for a procfs mount."""

import os


def list_pids(proc_root: str) -> set[int]:
    """
    Return the identifiers of all processes under proc_root.

    Only directories whose names are decimal numbers count as processes.
    Raises OSError if proc_root itself cannot be listed.
    """
    pids: set[int] = set()
    with os.scandir(proc_root) as entries:
        for entry in entries:
            if not (entry.name.isascii() and entry.name.isdecimal()):
                continue
            try:
                if entry.is_dir():
                    pids.add(int(entry.name))
            except OSError:
                # Entry vanished while listing
                continue
    return pids


def pid_path(proc_root: str, pid: int, *parts: str) -> str:
    return os.path.join(proc_root, str(pid), *parts)


def parse_cmdline(raw: bytes) -> list[str]:
    """Split a NUL-separated argument vector."""
    text = raw.decode("utf-8", errors="replace")
    return [token for token in text.split("\0") if token]


def split_command(argv: list[str], short_name: str) -> tuple[str, str]:
    """
    Turn an argument vector into (command, args) labels.

    The command is the basename of the first token. Kernel threads and
    zombies have an empty argv, so the short name is used instead.
    """
    # Some processes rewrite their argv into a single space-separated string
    tokens = " ".join(argv).split()
    if not tokens:
        return short_name, ""
    return os.path.basename(tokens[0]) or tokens[0], " ".join(tokens[1:])


def parse_stat(text: str) -> tuple[str, int, int]:
    """
    Parse /proc/<pid>/stat into (short_name, utime, stime).

    The comm field may itself contain spaces and parentheses, so it spans
    from the first "(" to the last ")".
    """
    start = text.index("(")
    end = text.rindex(")")
    name = text[start + 1 : end]
    # Fields after comm start at field 3 (state); utime and stime are 14 and 15
    fields = text[end + 2 :].split()
    return name, int(fields[11]), int(fields[12])


def parse_status_rss(text: str) -> int:
    """Return VmRSS in bytes; kernel threads have no VmRSS line and report 0."""
    for line in text.splitlines():
        if line.startswith("VmRSS:"):
            return int(line.split()[1]) * 1024
    return 0


def parse_io(text: str) -> tuple[int, int]:
    """Return (read_bytes, write_bytes) from /proc/<pid>/io."""
    counters = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            counters[key.strip()] = value.strip()
    try:
        return int(counters["read_bytes"]), int(counters["write_bytes"])
    except KeyError as exc:
        raise ValueError(f"io accounting missing {exc.args[0]}") from None


def parse_net_dev(text: str) -> tuple[int, int]:
    """
    Sum received and transmitted bytes over every interface in net/dev.

    The first two lines are headers. An interface row looks like
    "  eth0: <16 counters>"; received bytes is counter 1 and transmitted
    bytes is counter 9.
    """
    received = transmitted = 0
    for line in text.splitlines()[2:]:
        _, sep, data = line.partition(":")
        if not sep:
            continue
        counters = data.split()
        if len(counters) < 16:
            continue
        received += int(counters[0])
        transmitted += int(counters[8])
    return received, transmitted
