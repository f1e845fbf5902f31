"""Report pipeline models — metadata, outcomes, log records and responses."""

import traceback
from dataclasses import dataclass, field
from typing import Any

UNKNOWN = "unknown"

# Marker for "no report field" so a parsed JSON null can still be logged.
_MISSING = object()


@dataclass(frozen=True)
class RequestMetadata:
    timestamp: str
    request_id: str = UNKNOWN
    source_ip: str = UNKNOWN
    user_agent: str = UNKNOWN
    content_type: str = UNKNOWN

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "requestId": self.request_id,
            "sourceIp": self.source_ip,
            "userAgent": self.user_agent,
            "contentType": self.content_type,
        }


# ── Outcomes ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EmptyBody:
    pass


@dataclass(frozen=True)
class ParsedReport:
    payload: Any


@dataclass(frozen=True)
class MalformedBody:
    raw_body: str
    error: str


@dataclass(frozen=True)
class InternalFailure:
    error: str
    stack: str | None = None


Outcome = EmptyBody | ParsedReport | MalformedBody | InternalFailure


# ── Log record ───────────────────────────────────────────────────────

@dataclass
class LogRecord:
    metadata: RequestMetadata
    level: str | None = None
    message: str | None = None
    report: Any = _MISSING
    error: Any = None
    raw_body: str | None = None

    @property
    def has_report(self) -> bool:
        return self.report is not _MISSING

    def to_dict(self) -> dict:
        """Flatten into the wire shape, dropping fields that were never set."""
        entry = self.metadata.to_dict()
        if self.level is not None:
            entry["level"] = self.level
        if self.message is not None:
            entry["message"] = self.message
        if self.has_report:
            entry["report"] = self.report
        if self.error is not None:
            entry["error"] = self.error
        if self.raw_body is not None:
            entry["rawBody"] = self.raw_body
        return entry


# ── Response ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Response:
    status_code: int
    body: str

    def to_dict(self) -> dict:
        return {"statusCode": self.status_code, "body": self.body}


# ── Stage results ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Success:
    value: Any


@dataclass(frozen=True)
class Failure:
    error: BaseException
    stack: str = field(default="", compare=False)


def attempt(func, *args, **kwargs) -> Success | Failure:
    """Run one pipeline stage, turning a raised exception into a Failure."""
    try:
        return Success(func(*args, **kwargs))
    except Exception as e:
        return Failure(e, traceback.format_exc())
