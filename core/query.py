"""Query string parsing and re-encoding."""

from collections.abc import Iterable, Mapping
from urllib.parse import quote, unquote

from core.request_types import QueryValue

# Consumed by destination resolution, never forwarded
RESERVED_KEY = "path"

# Characters left unescaped by encodeURIComponent
_SAFE_CHARS = "-_.!~*'()"


def parse_raw_query(raw: str | None) -> dict[str, QueryValue]:
    """Parse a raw query string into a mapping.

    Keys and values are percent-decoded. A key without ``=`` maps to an empty
    string and repeated keys accumulate into a list in first-seen order.
    """
    out: dict[str, QueryValue] = {}
    if not raw or not isinstance(raw, str):
        return out
    qs = raw[1:] if raw.startswith("?") else raw
    for part in qs.split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        _accumulate(out, unquote(key), unquote(value))
    return out


def group_pairs(pairs: Iterable[tuple[str, str]]) -> dict[str, QueryValue]:
    """Build a query mapping from (key, value) pairs, grouping repeated keys."""
    out: dict[str, QueryValue] = {}
    for key, value in pairs:
        _accumulate(out, key, value)
    return out


def encode_query(params: Mapping[str, QueryValue]) -> str:
    """Percent-encode a query mapping, expanding lists into repeated pairs."""
    parts = []
    for key, value in params.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            parts.append(f"{_encode(key)}={_encode(item)}")
    return "&".join(parts)


def without_reserved(params: Mapping[str, QueryValue]) -> dict[str, QueryValue]:
    return {k: v for k, v in params.items() if k != RESERVED_KEY}


def append_query(url: str, params: Mapping[str, QueryValue]) -> str:
    """Append encoded params to url; url is returned unchanged when params is empty."""
    qs = encode_query(params)
    if not qs:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{qs}"


def first_value(value: QueryValue | None) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    return value or ""


def _accumulate(out: dict[str, QueryValue], key: str, value: str) -> None:
    if key not in out:
        out[key] = value
        return
    existing = out[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        out[key] = [existing, value]


def _encode(value: object) -> str:
    return quote(str(value), safe=_SAFE_CHARS)
