"""Output file for injected URLs, one per line."""

import threading
from typing import Optional

from reflectscan.core.errors import ConfigError, SinkWriteError


class OutputSink:
    """Append-only line writer shared by all workers.

    Usage:
        with OutputSink.open("injected.txt") as sink:
            sink.write_line("http://x/?q=1%27%22")
    """

    def __init__(self, stream, path: str = ""):
        self.path = path
        self._stream = stream
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str) -> "OutputSink":
        """Create (truncate) *path*; failure is a configuration error."""
        try:
            stream = open(path, "w", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Error creating output file {path}: {exc}") from exc
        return cls(stream, path)

    def write_line(self, line: str) -> None:
        with self._lock:
            try:
                self._stream.write(line + "\n")
                self._stream.flush()
            except (OSError, ValueError) as exc:
                raise SinkWriteError(f"Error writing to file {self.path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def open_sink(path: Optional[str]) -> Optional[OutputSink]:
    return OutputSink.open(path) if path else None
