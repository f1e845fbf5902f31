"""Log sinks — append-only destinations for serialized report records."""

import json
import os
import sys
import threading
from typing import Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    def write(self, line: str) -> None: ...


class StreamSink:
    """Writes one line per record to a text stream (stdout unless given)."""

    def __init__(self, stream=None):
        self._stream = stream

    def write(self, line: str) -> None:
        # Resolve stdout lazily so redirection after startup is honoured.
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()


class FileSink:
    """Append-only UTF-8 file sink; each line is written under a lock."""

    def __init__(self, path: str):
        self._lock = threading.Lock()
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._file = open(path, "a", encoding="utf-8")

    def write(self, line: str) -> None:
        with self._lock:
            self._file.write(line + "\n")
            self._file.flush()

    def close(self):
        with self._lock:
            if not self._file.closed:
                self._file.close()


class MemorySink:
    """Keeps written lines in memory for inspection."""

    def __init__(self):
        self._lock = threading.Lock()
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        with self._lock:
            self.lines.append(line)

    @property
    def records(self) -> list[dict]:
        with self._lock:
            return [json.loads(line) for line in self.lines]

    def clear(self):
        with self._lock:
            self.lines.clear()


def build_sink(config) -> LogSink:
    """Create the sink named by ``config.sink``."""
    if config.sink == "stdout":
        return StreamSink()
    if config.sink == "file":
        return FileSink(config.log_file)
    if config.sink == "memory":
        return MemorySink()
    raise ValueError(f"Unknown sink: {config.sink!r}")
