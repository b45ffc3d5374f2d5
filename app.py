"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_forward
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.router import DestinationResolver
from services.forwarder import Forwarder
from services.upstream import UpstreamClient

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            follow_redirects=True,
            transport=transport,
        )
        app.state.forwarder = Forwarder(
            config=config,
            logger=logger,
            upstream=UpstreamClient(client),
            resolver=DestinationResolver(config.upstream.webhook_url),
            header_builder=HeaderBuilder(config.upstream),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Webhook Forwarder", version="0.1.0", lifespan=lifespan)

    @app.api_route("/{full_path:path}", methods=METHODS)
    async def forward(request: Request, full_path: str):
        return await handle_forward(request, logger)

    return app
