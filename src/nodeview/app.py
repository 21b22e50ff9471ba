from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nodeview import __version__
from nodeview.config import StatusPageConfig
from nodeview.consul import ConsulCatalog
from nodeview.interfaces import primary_ipv4
from nodeview.ui.router import router as ui_router

logger = logging.getLogger(__name__)

IpResolver = Callable[[str], str]
CatalogFactory = Callable[[str, StatusPageConfig], Any]


def create_app(
    config: StatusPageConfig,
    *,
    resolve_ip: IpResolver = primary_ipv4,
    catalog_factory: CatalogFactory = ConsulCatalog.from_config,
) -> FastAPI:
    """Build the status page app.

    `resolve_ip` maps an interface name to its IPv4 address and `catalog_factory`
    builds a catalog client (a context manager with `list_nodes()`) for the local
    address; both are replaced in tests.
    """

    app = FastAPI(
        title="nodeview",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.nodeview_config = config
    app.state.resolve_ip = resolve_ip
    app.state.catalog_factory = catalog_factory

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> PlainTextResponse:
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return PlainTextResponse(f"{message}\n", status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal Server Error\n", status_code=500)

    app.include_router(ui_router)

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> PlainTextResponse:
        return PlainTextResponse("OK\n")

    return app
