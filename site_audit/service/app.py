"""FastAPI application serving audit reports as HTML, JSON and Markdown."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from .. import __version__
from ..config import SiteAuditConfig, load_config
from ..logging import get_logger, report_context
from ..render import HtmlRenderer, dump_json
from ..reports import ReportNotFoundError, ReportRegistry, registry_from_config
from ..repository import RepositoryUnavailableError

MARKDOWN_MEDIA_TYPE = "text/markdown; charset=utf-8"

_logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str


class ReportSummary(BaseModel):
    id: str
    label: str
    description: str = ""
    links: Dict[str, str]


def report_links(report_id: str) -> Dict[str, str]:
    base = f"/reports/{report_id}"
    return {"view": base, "json": f"{base}/json", "markdown": f"{base}/markdown"}


def _default_registry() -> ReportRegistry:
    return registry_from_config(load_config(Path.cwd()))


def create_app(
    registry_factory: Callable[[], ReportRegistry] = _default_registry,
    *,
    renderer: Optional[HtmlRenderer] = None,
) -> FastAPI:
    """Create the FastAPI application exposing the enabled reports."""

    app = FastAPI(title="Site Audit Service", version=__version__)
    html = renderer or HtmlRenderer()

    def get_registry() -> ReportRegistry:
        # A fresh registry per request so each page reflects the current snapshot.
        # Plain def: snapshot loading blocks, so FastAPI runs it in the threadpool.
        return registry_factory()

    async def _run(func: Callable[[], Any]) -> Any:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover - fallback path when not in async context
            return func()
        return await loop.run_in_executor(None, func)

    def _summaries(registry: ReportRegistry) -> List[ReportSummary]:
        return [
            ReportSummary(
                id=descriptor.id,
                label=descriptor.label,
                description=descriptor.description,
                links=report_links(descriptor.id),
            )
            for descriptor in registry.enabled().values()
        ]

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/reports", response_model=List[ReportSummary])
    async def list_reports(registry: ReportRegistry = Depends(get_registry)) -> List[ReportSummary]:
        return _summaries(registry)

    @app.get("/", response_class=HTMLResponse)
    async def index(registry: ReportRegistry = Depends(get_registry)) -> HTMLResponse:
        reports = [summary.model_dump() for summary in _summaries(registry)]
        return HTMLResponse(html.render_index(reports))

    @app.get("/reports/{report_id}", response_class=HTMLResponse)
    async def report_html(
        report_id: str,
        request: Request,
        registry: ReportRegistry = Depends(get_registry),
    ) -> HTMLResponse:
        params: Dict[str, str] = dict(request.query_params)
        links = report_links(report_id)

        def _render() -> str:
            with report_context(report_id):
                report = registry.create(report_id)
                _logger.info("Building report")
                model = report.render_table(report.build_data(), params)
                return html.render_report(
                    model,
                    params,
                    links={"JSON": links["json"], "Markdown": links["markdown"]},
                )

        return HTMLResponse(await _run(_render))

    @app.get("/reports/{report_id}/json")
    async def report_json(
        report_id: str,
        registry: ReportRegistry = Depends(get_registry),
    ) -> Response:
        def _render() -> str:
            with report_context(report_id):
                report = registry.create(report_id)
                _logger.info("Building report")
                return dump_json(report.render_json(report.build_data()))

        return Response(content=await _run(_render), media_type="application/json")

    @app.get("/reports/{report_id}/markdown")
    async def report_markdown(
        report_id: str,
        request: Request,
        registry: ReportRegistry = Depends(get_registry),
    ) -> Response:
        params: Dict[str, str] = dict(request.query_params)

        def _render() -> str:
            with report_context(report_id):
                report = registry.create(report_id)
                _logger.info("Building report")
                return report.render_markdown(report.build_data(), params)

        return Response(content=await _run(_render), media_type=MARKDOWN_MEDIA_TYPE)

    @app.exception_handler(ReportNotFoundError)
    async def report_not_found_handler(_: Any, exc: ReportNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RepositoryUnavailableError)
    async def repository_unavailable_handler(
        _: Any, exc: RepositoryUnavailableError
    ) -> JSONResponse:
        _logger.error("Content repository unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Content repository unavailable"},
        )

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: Optional[SiteAuditConfig] = None,
) -> None:  # pragma: no cover - integration path
    if config is None:
        app = create_app()
    else:
        app = create_app(lambda: registry_from_config(config))
    _logger.info("Serving audit reports on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


__all__ = [
    "HealthResponse",
    "MARKDOWN_MEDIA_TYPE",
    "ReportSummary",
    "create_app",
    "report_links",
    "run_service",
]
