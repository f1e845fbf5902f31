import json
import os
from datetime import datetime, timezone

import jsonschema
import pytest

from report_collector.emitter import LogEmitter
from report_collector.handler import ReportHandler
from report_collector.sink import MemorySink

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "log_record_schema.json")

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def make_event():
    """Factory for API Gateway HTTP API style events."""

    def _make(body="", request_id="test-123", source_ip="127.0.0.1",
              headers=None, **extra):
        if headers is None:
            headers = {
                "user-agent": "Mozilla/5.0",
                "content-type": "application/reports+json",
            }
        event = {
            "requestContext": {
                "requestId": request_id,
                "http": {"sourceIp": source_ip},
            },
            "headers": headers,
            "body": body,
        }
        event.update(extra)
        return event

    return _make


@pytest.fixture
def sample_report():
    return {
        "type": "csp-violation",
        "url": "https://example.com/page",
        "user_agent": "Mozilla/5.0",
        "body": {
            "documentURL": "https://example.com/page",
            "blockedURL": "https://evil.com/script.js",
            "effectiveDirective": "script-src",
            "disposition": "enforce",
        },
    }


@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def handler(memory_sink, fixed_clock):
    return ReportHandler(LogEmitter(memory_sink), clock=fixed_clock)


@pytest.fixture
def record_validator():
    with open(SCHEMA_PATH, "r") as f:
        schema = json.load(f)
    return jsonschema.Draft202012Validator(schema)
