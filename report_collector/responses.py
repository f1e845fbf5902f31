"""Map an outcome to the acknowledgement returned to the browser."""

import json

from report_collector.models import (
    EmptyBody,
    InternalFailure,
    MalformedBody,
    Outcome,
    ParsedReport,
    Response,
)

# Browsers retry on non-2xx, so every client-side problem is acknowledged with 200.
_STATUS_AND_MESSAGE = {
    EmptyBody: (200, "Report received (empty body)"),
    ParsedReport: (200, "Report received successfully"),
    MalformedBody: (200, "Report received (invalid JSON)"),
    InternalFailure: (500, "Internal server error"),
}


def build_response(outcome: Outcome) -> Response:
    status_code, message = _STATUS_AND_MESSAGE[type(outcome)]
    return Response(status_code=status_code, body=json.dumps({"message": message}))
