"""Serialize log records to single-line JSON and hand them to a sink."""

import json
import logging

from report_collector.models import LogRecord

logger = logging.getLogger(__name__)


def serialize_record(record: LogRecord) -> str:
    """Serialize *record* as compact single-line JSON.

    Non-ASCII text is kept as-is. If the result is not valid UTF-8 (lone
    surrogates), fall back to ASCII escapes, which round-trip the same value.
    """
    entry = record.to_dict()
    line = json.dumps(
        entry, ensure_ascii=False, allow_nan=False, separators=(",", ":")
    )
    try:
        line.encode("utf-8")
    except UnicodeEncodeError:
        line = json.dumps(
            entry, ensure_ascii=True, allow_nan=False, separators=(",", ":")
        )
    return line


class LogEmitter:
    """Writes exactly one line per record; sink failures never propagate."""

    def __init__(self, sink):
        self._sink = sink

    @property
    def sink(self):
        return self._sink

    def emit(self, record: LogRecord) -> bool:
        """Serialize and write *record*. Returns False if the sink write failed.

        Serialization errors are raised to the caller.
        """
        line = serialize_record(record)
        try:
            self._sink.write(line)
        except Exception as e:
            logger.error(
                "Failed to write report record (requestId=%s): %s",
                record.metadata.request_id, e,
            )
            return False
        return True
