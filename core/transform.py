"""Payload extraction and upstream message derivation."""

import json
import math
from typing import Any

from core.exceptions import EmptyBody, InvalidJSON
from core.request_types import JSONValue, QueryValue

# Checked in order; the first key present in an upstream JSON object wins
MESSAGE_FIELDS = ("message", "text", "response", "body", "result")

# Integral floats below this magnitude serialize without a fraction, as in JavaScript
_INTEGRAL_FLOAT_LIMIT = 1e21


def dump_json(value: Any) -> str:
    """Compact JSON, matching what browsers and Node produce."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def load_json(text: str) -> JSONValue:
    """Strict JSON parsing: NaN and Infinity are rejected, integral floats become ints."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_parse_number)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_number(text: str) -> int | float | None:
    value = float(text)
    if math.isinf(value):
        # overflowing literals serialize as null in JavaScript
        return None
    if value.is_integer() and abs(value) < _INTEGRAL_FLOAT_LIMIT:
        return int(value)
    return value


def extract_payload(method: str, body: str | None, query: dict[str, QueryValue]) -> JSONValue:
    """Return the payload to forward.

    GET requests forward their query mapping; every other method must carry a
    JSON body, which may be any JSON type.
    """
    if method == "GET":
        return query
    if not body:
        raise EmptyBody()
    try:
        return load_json(body)
    except ValueError:
        raise InvalidJSON() from None


def derive_message(text: str) -> str:
    """Pick a human-readable message out of an upstream response body."""
    try:
        parsed = load_json(text)
    except ValueError:
        return text

    if isinstance(parsed, dict):
        for field in MESSAGE_FIELDS:
            if field in parsed:
                value = parsed[field]
                return value if isinstance(value, str) else dump_json(value)
        return dump_json(parsed)

    if isinstance(parsed, str):
        return parsed
    return dump_json(parsed)
