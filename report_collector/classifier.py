"""Classify a report body as empty, parsed JSON, or malformed."""

import json
import math

from report_collector.models import EmptyBody, MalformedBody, Outcome, ParsedReport

# Deeper documents cannot be written back out by the json encoder.
MAX_DEPTH = 200


def _reject_constant(name: str):
    # json.loads accepts NaN/Infinity by default; browsers never send them.
    raise ValueError(f"Invalid JSON literal: {name}")


def _parse_float(text: str):
    # Out-of-range numbers are logged as null, like JSON.stringify does.
    value = float(text)
    return value if math.isfinite(value) else None


def _parse_int(text: str):
    try:
        return int(text)
    except ValueError:
        # Past the int digit limit; fall back to a double.
        return _parse_float(text)


def _depth(value) -> int:
    deepest = 0
    stack = [(value, 1)]
    while stack:
        current, level = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            continue
        deepest = max(deepest, level)
        stack.extend((child, level + 1) for child in children)
    return deepest


def parse_report(body: str):
    """Parse *body* as strict JSON. Raises ValueError on failure."""
    try:
        payload = json.loads(
            body,
            parse_constant=_reject_constant,
            parse_float=_parse_float,
            parse_int=_parse_int,
        )
    except RecursionError:
        raise ValueError(f"Nesting depth exceeds {MAX_DEPTH}") from None
    if _depth(payload) > MAX_DEPTH:
        raise ValueError(f"Nesting depth exceeds {MAX_DEPTH}")
    return payload


def classify_body(body: str | None) -> Outcome:
    """Return EmptyBody, ParsedReport or MalformedBody for *body*.

    The raw text on a MalformedBody is the input string itself, untouched.
    """
    if body is None or body.strip() == "":
        return EmptyBody()

    try:
        payload = parse_report(body)
    except ValueError as e:
        return MalformedBody(raw_body=body, error=str(e))
    return ParsedReport(payload=payload)
