"""Shared request data types."""

from dataclasses import dataclass, field
from typing import Any

JSONValue = dict[str, Any] | list[Any] | str | int | float | bool | None

HeaderValue = str | list[str]
QueryValue = str | list[str]


@dataclass(frozen=True)
class InboundRequest:
    """An inbound request as delivered by the host."""

    method: str = "GET"
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    query: dict[str, QueryValue] = field(default_factory=dict)
    raw_query: str = ""
    body: str | None = None


@dataclass(frozen=True)
class ResolvedDestination:
    """Upstream URL before query reconciliation."""

    url: str
    extra_path: str = ""


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    url: str
    headers: dict[str, str]
    body: str | None = None


@dataclass(frozen=True)
class UpstreamResponse:
    """Raw result of the upstream call."""

    status_code: int | None
    ok: bool
    text: str


@dataclass(frozen=True)
class OutboundResponse:
    """Final response handed back to the host."""

    status_code: int
    headers: dict[str, str]
    body: dict[str, Any] | None = None
