"""Header construction for upstream requests and responses."""

import base64
from collections.abc import Mapping
from typing import Any

from core.config import UpstreamSettings

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "Content-Type, Authorization, X-API-Key, X-Forward-Path, x-forward-path, Accept"
    ),
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, OPTIONS, DELETE",
    "Access-Control-Allow-Credentials": "false",
    "Access-Control-Max-Age": "86400",
}

# Inbound headers copied to the upstream under these exact names
PASSTHROUGH_HEADERS = ("x-api-key", "x-request-id", "user-agent", "accept")


def cors_headers() -> dict[str, str]:
    """Return a fresh copy of the fixed CORS header set."""
    return dict(CORS_HEADERS)


def normalize_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    """Lower-case header names into a fresh dict; list values are joined."""
    normalized: dict[str, str] = {}
    for key, value in (headers or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        normalized[key.lower()] = str(value)
    return normalized


def basic_auth_value(username: str, password: str) -> str:
    creds = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {creds}"


class HeaderBuilder:
    """Build upstream headers from the normalized inbound set."""

    def __init__(self, upstream: UpstreamSettings) -> None:
        self._upstream = upstream

    def build_upstream_headers(self, method: str, headers: dict[str, str]) -> dict[str, str]:
        """Construct the outbound header set.

        Args:
            method: Upper-cased inbound method.
            headers: Inbound headers, already normalized to lowercase names.
        """
        upstream: dict[str, str] = {}
        if method != "GET":
            upstream["Content-Type"] = "application/json"

        authorization = self._authorization(headers)
        if authorization:
            upstream["Authorization"] = authorization

        for name in PASSTHROUGH_HEADERS:
            value = headers.get(name)
            if value:
                upstream[name] = value
        return upstream

    def _authorization(self, headers: dict[str, str]) -> str | None:
        """Configured credentials win over anything sent by the caller."""
        if self._upstream.has_basic_auth:
            return basic_auth_value(self._upstream.username, self._upstream.password)
        return headers.get("authorization") or None
