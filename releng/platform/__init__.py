"""Platform layer: the single place where external programs are started."""

from .process import ProcessError, run, run_streaming, stream_records

__all__ = [
    "ProcessError",
    "run",
    "run_streaming",
    "stream_records",
]
