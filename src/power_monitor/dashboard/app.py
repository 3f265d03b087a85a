"""FastAPI application factory for the Power Monitor dashboard."""

from __future__ import annotations

from fastapi import FastAPI, Request

from power_monitor import __version__
from power_monitor.config.manager import ConfigManager
from power_monitor.config.schema import AppConfig
from power_monitor.sampling.scheduler import SamplingScheduler
from power_monitor.views.pagination import TablePaginator


def create_app(
    config: AppConfig,
    scheduler: SamplingScheduler,
    paginator: TablePaginator | None = None,
    config_manager: ConfigManager | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Power Monitor",
        description="Live power and temperature telemetry dashboard",
        version=__version__,
    )

    @app.middleware("http")
    async def disable_browser_cache(request: Request, call_next):
        response = await call_next(request)
        if request.method in {"GET", "HEAD"}:
            # The window changes every tick; never serve a cached projection.
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response

    app.state.config = config
    app.state.scheduler = scheduler
    app.state.paginator = paginator or TablePaginator(config.dashboard.default_page_size)
    # A replaced window starts over on page 1
    scheduler.on_source_change(lambda _source: app.state.paginator.reset())
    app.state.config_manager = config_manager

    from power_monitor.dashboard.routes.api import router as api_router
    from power_monitor.dashboard.routes.sse import router as sse_router

    app.include_router(api_router, prefix="/api")
    app.include_router(sse_router, prefix="/api")

    return app
