"""The forwarding pipeline: one inbound request, one upstream call, one response."""

import logging
from typing import Any

from core.config import Config
from core.exceptions import ForwardError, InvalidApiKey
from core.headers import HeaderBuilder, cors_headers, normalize_headers
from core.protocols import RequestLogger
from core.query import append_query, parse_raw_query, without_reserved
from core.request_types import (
    InboundRequest,
    OutboundResponse,
    PreparedRequest,
    QueryValue,
    UpstreamResponse,
)
from core.router import DestinationResolver
from core.transform import derive_message, dump_json, extract_payload
from services.upstream import UpstreamClient

logger = logging.getLogger(__name__)

ROUTE_NAME = "upstream"


class Forwarder:
    """Translate inbound requests into upstream calls and normalized responses."""

    def __init__(
        self,
        config: Config,
        logger: RequestLogger,
        upstream: UpstreamClient,
        resolver: DestinationResolver | None = None,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._upstream = upstream
        self._resolver = resolver or DestinationResolver(config.upstream.webhook_url)
        self._headers = header_builder or HeaderBuilder(config.upstream)

    async def forward(self, request: InboundRequest) -> OutboundResponse:
        """Run every stage for one request. Never raises."""
        method = (request.method or "GET").upper()
        if method == "OPTIONS":
            return OutboundResponse(status_code=204, headers=cors_headers())

        try:
            prepared = self.prepare(request)
            self._logger.log_forward(prepared.method, prepared.url, prepared.headers, prepared.body)
            result = await self._upstream.send(prepared)
            return self._normalize(prepared, result)
        except ForwardError as e:
            self._logger.log_error(ROUTE_NAME, e.status_code, e.error_code)
            return error_response(e.status_code, e.error_code, e.details)
        except Exception as e:
            logger.exception("Forwarding failed")
            details = str(e) or type(e).__name__
            self._logger.log_error(ROUTE_NAME, 500, details)
            return error_response(500, "internal_error", details)

    def prepare(self, request: InboundRequest) -> PreparedRequest:
        """Validate the request and build the upstream call (stages 2 to 6)."""
        method = (request.method or "GET").upper()
        headers = normalize_headers(request.headers)
        self._check_api_key(headers)

        query = self._inbound_query(request)
        payload = extract_payload(method, request.body, query)
        destination = self._resolver.resolve(query, headers)
        upstream_headers = self._headers.build_upstream_headers(method, headers)

        url = destination.url
        body = None
        if method == "GET":
            url = append_query(url, without_reserved(query))
        elif payload is not None:
            body = dump_json(payload)

        return PreparedRequest(method=method, url=url, headers=upstream_headers, body=body)

    def _check_api_key(self, headers: dict[str, str]) -> None:
        required = self._config.auth.api_key
        if not required:
            return
        if headers.get("x-api-key", "") != required:
            raise InvalidApiKey()

    @staticmethod
    def _inbound_query(request: InboundRequest) -> dict[str, QueryValue]:
        """Structured mapping when the host supplied one, else the raw string."""
        if request.query:
            return dict(request.query)
        return parse_raw_query(request.raw_query)

    def _normalize(self, prepared: PreparedRequest, result: UpstreamResponse) -> OutboundResponse:
        status = result.status_code
        if not isinstance(status, int):
            status = 200 if result.ok else 502
        message = derive_message(result.text)
        if not result.ok:
            self._logger.log_error(ROUTE_NAME, status, result.text)
        self._logger.log_response(prepared.method, prepared.url, status, message)
        return OutboundResponse(
            status_code=status,
            headers=cors_headers(),
            body={
                "ok": result.ok,
                "status": status,
                "upstreamBody": result.text,
                "message": message,
            },
        )


def error_response(status_code: int, error_code: str, details: str | None = None) -> OutboundResponse:
    body: dict[str, Any] = {"ok": False, "error": error_code}
    if details is not None:
        body["details"] = details
    return OutboundResponse(status_code=status_code, headers=cors_headers(), body=body)
