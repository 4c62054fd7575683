"""Render process samples in the Prometheus text exposition format."""

from collections.abc import Iterable

from proclite.models import ProcessSample

METRIC_NAMES = (
    "process_cpu_usage",
    "process_memory_usage",
    "process_network_receive_bytes",
    "process_network_transmit_bytes",
    "process_disk_read_bytes",
    "process_disk_write_bytes",
)


def escape_label_value(value: str) -> str:
    # psutil decodes argv with surrogateescape; lone surrogates cannot be encoded as UTF-8
    value = value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def render_sample(sample: ProcessSample) -> str:
    """Render one sample as six newline-terminated metric lines."""
    labels = 'pid="{}",command="{}",args="{}"'.format(
        sample.pid,
        escape_label_value(sample.command),
        escape_label_value(sample.args),
    )
    values = (
        f"{sample.cpu_seconds:.2f}",
        str(sample.memory_rss),
        str(sample.network_receive_bytes),
        str(sample.network_transmit_bytes),
        str(sample.disk_read_bytes),
        str(sample.disk_write_bytes),
    )
    return "".join(f"{name}{{{labels}}} {value}\n" for name, value in zip(METRIC_NAMES, values))


def render_document(samples: Iterable[ProcessSample]) -> str:
    return "".join(render_sample(sample) for sample in samples)
