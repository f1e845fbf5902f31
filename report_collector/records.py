"""Merge request metadata and a classification outcome into one log record."""

from report_collector.models import (
    EmptyBody,
    InternalFailure,
    LogRecord,
    MalformedBody,
    Outcome,
    ParsedReport,
    RequestMetadata,
)

EMPTY_BODY_MESSAGE = "Received empty request body"
PARSE_FAILURE_MESSAGE = "Failed to parse JSON"
INTERNAL_ERROR_MESSAGE = "Internal error processing request"


def build_log_record(metadata: RequestMetadata, outcome: Outcome) -> LogRecord:
    if isinstance(outcome, EmptyBody):
        return LogRecord(metadata, level="WARNING", message=EMPTY_BODY_MESSAGE)

    if isinstance(outcome, ParsedReport):
        return LogRecord(metadata, report=outcome.payload)

    if isinstance(outcome, MalformedBody):
        return LogRecord(
            metadata,
            level="ERROR",
            message=PARSE_FAILURE_MESSAGE,
            error=outcome.error,
            raw_body=outcome.raw_body,
        )

    if isinstance(outcome, InternalFailure):
        error = {"message": outcome.error}
        if outcome.stack:
            error["stack"] = outcome.stack
        return LogRecord(
            metadata, level="ERROR", message=INTERNAL_ERROR_MESSAGE, error=error
        )

    raise TypeError(f"Unknown outcome: {outcome!r}")
