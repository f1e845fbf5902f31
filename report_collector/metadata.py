"""Extract caller metadata and the raw body from an API Gateway style event."""

import base64
import binascii
from collections.abc import Mapping
from datetime import datetime, timezone

from report_collector.models import UNKNOWN, RequestMetadata


def utc_timestamp(now: datetime | None = None) -> str:
    """Render *now* (default: current UTC time) as ISO-8601 with millis and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _as_text(value, default: str) -> str:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value
    return str(value)


def lookup(mapping, *path: str, default: str = UNKNOWN) -> str:
    """Walk nested mappings along *path*.

    Returns *default* when a step is missing, is not a mapping, or the leaf
    is None or an empty string.
    """
    current = mapping
    for key in path:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    if isinstance(current, Mapping):
        return default
    return _as_text(current, default)


def header_lookup(headers, name: str, default: str = UNKNOWN) -> str:
    """Case-insensitive header lookup: lower-case key, Title-Case key, then a scan."""
    if not isinstance(headers, Mapping):
        return default

    lower = name.lower()
    for key in (lower, lower.title()):
        value = headers.get(key)
        if value not in (None, ""):
            return _as_text(value, default)

    for key, value in headers.items():
        if isinstance(key, str) and key.lower() == lower:
            return _as_text(value, default)
    return default


def extract_metadata(event, clock=None) -> RequestMetadata:
    """Build RequestMetadata from *event*; every missing field becomes "unknown"."""
    now = clock() if clock is not None else None
    source_ip = lookup(event, "requestContext", "http", "sourceIp")
    if source_ip == UNKNOWN:
        source_ip = lookup(event, "requestContext", "identity", "sourceIp")

    headers = event.get("headers") if isinstance(event, Mapping) else None
    return RequestMetadata(
        timestamp=utc_timestamp(now),
        request_id=lookup(event, "requestContext", "requestId"),
        source_ip=source_ip,
        user_agent=header_lookup(headers, "user-agent"),
        content_type=header_lookup(headers, "content-type"),
    )


def resolve_body(event) -> str:
    """Return the request body as text; absent bodies become ""."""
    if not isinstance(event, Mapping):
        return ""
    body = event.get("body")
    if body is None:
        return ""
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    if event.get("isBase64Encoded") and body:
        try:
            return base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            # Left as-is; the classifier reports it as malformed.
            return body
    return body
