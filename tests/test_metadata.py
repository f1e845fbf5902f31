"""Tests for report_collector/metadata.py."""

import base64
from datetime import datetime, timedelta, timezone

from report_collector.metadata import (
    extract_metadata,
    header_lookup,
    lookup,
    resolve_body,
    utc_timestamp,
)
from report_collector.models import UNKNOWN


class TestUtcTimestamp:
    def test_millisecond_precision_with_z(self):
        now = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc)
        assert utc_timestamp(now) == "2024-01-15T10:30:00.123Z"

    def test_converts_other_offsets_to_utc(self):
        tz = timezone(timedelta(hours=2))
        now = datetime(2024, 1, 15, 12, 0, 0, tzinfo=tz)
        assert utc_timestamp(now) == "2024-01-15T10:00:00.000Z"

    def test_default_is_now(self):
        ts = utc_timestamp()
        assert ts.endswith("Z")
        assert "T" in ts


class TestLookup:
    def test_nested_value(self):
        data = {"a": {"b": {"c": "value"}}}
        assert lookup(data, "a", "b", "c") == "value"

    def test_missing_key(self):
        assert lookup({"a": {}}, "a", "b") == UNKNOWN

    def test_intermediate_not_mapping(self):
        assert lookup({"a": "scalar"}, "a", "b") == UNKNOWN

    def test_none_and_empty_use_default(self):
        assert lookup({"a": None}, "a") == UNKNOWN
        assert lookup({"a": ""}, "a") == UNKNOWN

    def test_mapping_leaf_uses_default(self):
        assert lookup({"a": {"b": 1}}, "a") == UNKNOWN

    def test_non_string_leaf_rendered(self):
        assert lookup({"a": 42}, "a") == "42"

    def test_custom_default(self):
        assert lookup({}, "a", default="n/a") == "n/a"

    def test_non_mapping_root(self):
        assert lookup(None, "a") == UNKNOWN


class TestHeaderLookup:
    def test_lower_case_key(self):
        assert header_lookup({"user-agent": "UA"}, "user-agent") == "UA"

    def test_title_case_key(self):
        assert header_lookup({"User-Agent": "UA"}, "user-agent") == "UA"

    def test_other_casing(self):
        assert header_lookup({"USER-AGENT": "UA"}, "user-agent") == "UA"

    def test_lower_case_preferred(self):
        headers = {"content-type": "lower", "Content-Type": "title"}
        assert header_lookup(headers, "content-type") == "lower"

    def test_empty_lower_falls_through_to_title(self):
        headers = {"user-agent": "", "User-Agent": "UA"}
        assert header_lookup(headers, "user-agent") == "UA"

    def test_missing(self):
        assert header_lookup({}, "user-agent") == UNKNOWN

    def test_headers_none(self):
        assert header_lookup(None, "user-agent") == UNKNOWN


class TestExtractMetadata:
    def test_all_fields(self, make_event, fixed_clock):
        meta = extract_metadata(make_event(), fixed_clock)
        assert meta.timestamp == "2024-01-15T10:30:00.123Z"
        assert meta.request_id == "test-123"
        assert meta.source_ip == "127.0.0.1"
        assert meta.user_agent == "Mozilla/5.0"
        assert meta.content_type == "application/reports+json"

    def test_missing_request_id_only(self, make_event):
        event = make_event()
        del event["requestContext"]["requestId"]
        meta = extract_metadata(event)
        assert meta.request_id == UNKNOWN
        assert meta.source_ip == "127.0.0.1"
        assert meta.user_agent == "Mozilla/5.0"
        assert meta.content_type == "application/reports+json"

    def test_missing_source_ip_only(self, make_event):
        event = make_event()
        del event["requestContext"]["http"]
        meta = extract_metadata(event)
        assert meta.source_ip == UNKNOWN
        assert meta.request_id == "test-123"

    def test_missing_user_agent_only(self, make_event):
        meta = extract_metadata(make_event(headers={"content-type": "application/json"}))
        assert meta.user_agent == UNKNOWN
        assert meta.content_type == "application/json"

    def test_missing_content_type_only(self, make_event):
        meta = extract_metadata(make_event(headers={"user-agent": "UA"}))
        assert meta.content_type == UNKNOWN
        assert meta.user_agent == "UA"

    def test_rest_api_source_ip(self):
        event = {"requestContext": {"requestId": "r1", "identity": {"sourceIp": "10.0.0.9"}}}
        assert extract_metadata(event).source_ip == "10.0.0.9"

    def test_empty_event(self):
        meta = extract_metadata({})
        assert meta.request_id == UNKNOWN
        assert meta.source_ip == UNKNOWN
        assert meta.user_agent == UNKNOWN
        assert meta.content_type == UNKNOWN
        assert meta.timestamp.endswith("Z")

    def test_to_dict_wire_names(self, make_event, fixed_clock):
        meta = extract_metadata(make_event(), fixed_clock)
        assert meta.to_dict() == {
            "timestamp": "2024-01-15T10:30:00.123Z",
            "requestId": "test-123",
            "sourceIp": "127.0.0.1",
            "userAgent": "Mozilla/5.0",
            "contentType": "application/reports+json",
        }


class TestResolveBody:
    def test_plain_body(self):
        assert resolve_body({"body": "{}"}) == "{}"

    def test_missing_and_none(self):
        assert resolve_body({}) == ""
        assert resolve_body({"body": None}) == ""

    def test_base64_body(self):
        text = '{"type":"csp-violation","emoji":"\U0001F600"}'
        encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
        assert resolve_body({"body": encoded, "isBase64Encoded": True}) == text

    def test_invalid_base64_returned_untouched(self):
        assert resolve_body({"body": "not base64!", "isBase64Encoded": True}) == "not base64!"
