"""Request-to-log pipeline and the serverless entry point."""

import logging
import threading

from report_collector.classifier import classify_body
from report_collector.config import load_config
from report_collector.emitter import LogEmitter
from report_collector.metadata import extract_metadata, resolve_body, utc_timestamp
from report_collector.models import (
    Failure,
    InternalFailure,
    RequestMetadata,
    Response,
    attempt,
)
from report_collector.records import build_log_record
from report_collector.responses import build_response
from report_collector.sink import build_sink

logger = logging.getLogger(__name__)


class ReportHandler:
    """Runs one request through extract -> classify -> record -> emit -> respond.

    Holds no per-request state, so a single instance serves concurrent calls.
    """

    def __init__(self, emitter: LogEmitter, clock=None, include_stack_trace: bool = True):
        self._emitter = emitter
        self._clock = clock
        self._include_stack_trace = include_stack_trace

    @property
    def emitter(self) -> LogEmitter:
        return self._emitter

    def handle(self, event) -> Response:
        metadata_result = attempt(extract_metadata, event, self._clock)
        if isinstance(metadata_result, Failure):
            return self._fail(self._fallback_metadata(), metadata_result)
        metadata = metadata_result.value

        outcome_result = attempt(lambda: classify_body(resolve_body(event)))
        if isinstance(outcome_result, Failure):
            return self._fail(metadata, outcome_result)
        outcome = outcome_result.value

        record_result = attempt(build_log_record, metadata, outcome)
        if isinstance(record_result, Failure):
            return self._fail(metadata, record_result)

        emit_result = attempt(self._emitter.emit, record_result.value)
        if isinstance(emit_result, Failure):
            return self._fail(metadata, emit_result)

        return build_response(outcome)

    def _fail(self, metadata: RequestMetadata, failure: Failure) -> Response:
        """Log the single InternalFailure record for this request and return a 500."""
        outcome = InternalFailure(
            error=str(failure.error) or type(failure.error).__name__,
            stack=failure.stack if self._include_stack_trace else None,
        )
        record = build_log_record(metadata, outcome)
        try:
            self._emitter.emit(record)
        except Exception:
            logger.exception("Failed to emit internal-failure record")
        return build_response(outcome)

    @staticmethod
    def _fallback_metadata() -> RequestMetadata:
        return RequestMetadata(timestamp=utc_timestamp())


_default_handler: ReportHandler | None = None
_default_lock = threading.Lock()


def create_handler(config=None, clock=None) -> ReportHandler:
    """Build a ReportHandler wired to the sink named in *config*."""
    if config is None:
        config = load_config()
    emitter = LogEmitter(build_sink(config))
    return ReportHandler(
        emitter, clock=clock, include_stack_trace=config.include_stack_trace
    )


def set_default_handler(handler: ReportHandler | None):
    """Replace the handler used by report_handler (None rebuilds it on next call)."""
    global _default_handler
    with _default_lock:
        _default_handler = handler


def get_default_handler() -> ReportHandler:
    global _default_handler
    with _default_lock:
        if _default_handler is None:
            _default_handler = create_handler()
        return _default_handler


def report_handler(event, context=None) -> dict:
    """Serverless entry point: returns {"statusCode": ..., "body": ...}."""
    return get_default_handler().handle(event).to_dict()
