"""Configuration for the proclite exporter.

Every setting can be overridden by an environment variable; an unset or empty
variable falls back to the default.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

READERS = ("psutil", "procfs")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

T = TypeVar("T")


class ConfigError(ValueError):
    """Raised when an environment override cannot be used."""


@dataclass
class ExporterConfig:
    """Exporter configuration."""

    port: int = 7000
    proc_mount: str = "/proc"
    sys_mount: str = "/sys"  # reserved, the collectors only read proc_mount
    update_interval: float = 15.0  # seconds between the end of one cycle and the next
    max_workers: int = 32
    reader: str = "psutil"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")
        if self.update_interval <= 0:
            raise ConfigError(f"update interval must be positive, got {self.update_interval}")
        if self.max_workers < 1:
            raise ConfigError(f"max workers must be at least 1, got {self.max_workers}")
        if self.reader not in READERS:
            raise ConfigError(f"unknown process reader {self.reader!r}, expected one of {READERS}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"unknown log level {self.log_level!r}, expected one of {LOG_LEVELS}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExporterConfig":
        """Build a config from environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()

        return cls(
            port=_parse(env, "METRICS_PORT", int, defaults.port),
            proc_mount=env.get("PROC_MOUNT") or defaults.proc_mount,
            sys_mount=env.get("SYS_MOUNT") or defaults.sys_mount,
            update_interval=_parse(env, "UPDATE_INTERVAL", float, defaults.update_interval),
            max_workers=_parse(env, "MAX_WORKERS", int, defaults.max_workers),
            reader=(env.get("PROCESS_READER") or defaults.reader).lower(),
            log_level=(env.get("LOG_LEVEL") or defaults.log_level).upper(),
        )


def _parse(env: Mapping[str, str], name: str, convert: Callable[[str], T], default: T) -> T:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError:
        raise ConfigError(f"{name}={raw!r} is not a valid {convert.__name__}") from None
