"""FastAPI route handlers."""

import logging
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.headers import cors_headers
from core.protocols import RequestLogger
from core.query import group_pairs
from core.request_types import InboundRequest, OutboundResponse

log = logging.getLogger(__name__)

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def build_inbound_request(request: Request) -> InboundRequest | Response:
    """Convert a Starlette request, or return an error Response for oversized bodies."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        return Response(
            content='{"ok": false, "error": "request_too_large"}',
            status_code=413,
            media_type="application/json",
            headers=cors_headers(),
        )

    headers: dict[str, Any] = {}
    for key, value in request.headers.items():
        existing = headers.get(key)
        if existing is None:
            headers[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            headers[key] = [existing, value]

    return InboundRequest(
        method=request.method,
        headers=headers,
        query=group_pairs(request.query_params.multi_items()),
        raw_query=request.url.query,
        body=raw_body.decode("utf-8", errors="replace") if raw_body else None,
    )


def to_response(outbound: OutboundResponse) -> Response:
    if outbound.body is None:
        return Response(status_code=outbound.status_code, headers=outbound.headers)
    return JSONResponse(
        content=outbound.body,
        status_code=outbound.status_code,
        headers=outbound.headers,
    )


async def handle_forward(request: Request, logger: RequestLogger) -> Response:
    """Handle any inbound request by forwarding it upstream."""
    forwarder = request.app.state.forwarder
    # Preflight never depends on the body
    if request.method == "OPTIONS":
        return to_response(await forwarder.forward(InboundRequest(method="OPTIONS")))

    inbound = await build_inbound_request(request)
    if isinstance(inbound, Response):
        return inbound

    try:
        logger.log_incoming(inbound.method, request.url.path, dict(request.headers), inbound.body)
    except OSError:
        log.warning("Failed to write incoming request log", exc_info=True)

    return to_response(await forwarder.forward(inbound))
