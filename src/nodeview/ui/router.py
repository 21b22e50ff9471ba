from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from starlette.responses import Response

from nodeview.config import StatusPageConfig
from nodeview.errors import StatusPageError, TemplateRenderError
from nodeview.nodes import PageData, classify_nodes, web_predicate

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
PAGE_TEMPLATE = "nodes.html"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


def render_page(
    data: PageData, *, title: str = "Cluster Nodes", template_name: str = PAGE_TEMPLATE
) -> str:
    try:
        template = templates.get_template(template_name)
        return template.render(title=title, **asdict(data))
    except TemplateError as exc:
        raise TemplateRenderError(f"{template_name}: {exc}") from exc


def _get_config(request: Request) -> StatusPageConfig:
    return request.app.state.nodeview_config


def _build_page(request: Request) -> str:
    config = _get_config(request)
    state = request.app.state

    local_ip = state.resolve_ip(config.iface)
    with state.catalog_factory(local_ip, config) as catalog:
        catalog_nodes = catalog.list_nodes()

    data = classify_nodes(catalog_nodes, local_ip, is_web=web_predicate(config.web_prefix))
    return render_page(data, title=f"Cluster Nodes • {config.datacenter}")


@router.api_route(
    "/", methods=["GET", "HEAD"], response_class=HTMLResponse, response_model=None
)
def ui_nodes(request: Request) -> Response:
    # Sync endpoint: runs on the threadpool, the catalog call blocks.
    try:
        page = _build_page(request)
    except StatusPageError as exc:
        logger.warning("%s (%s)", exc.message, exc)
        return PlainTextResponse(exc.body)
    return HTMLResponse(page)
