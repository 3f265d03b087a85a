"""REST API endpoints returning JSON data."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from power_monitor.config.schema import PAGE_SIZES
from power_monitor.dashboard.log_buffer import log_buffer
from power_monitor.sampling.scheduler import SamplingScheduler
from power_monitor.views.pagination import TablePaginator
from power_monitor.views.projector import Metric, ViewProjector

router = APIRouter()
logger = logging.getLogger(__name__)


# ── Request models ───────────────────────────────────

class PageRequest(BaseModel):
    page: int


class PageSizeRequest(BaseModel):
    size: int


# ── Payload builders ─────────────────────────────────

def status_payload(scheduler: SamplingScheduler) -> dict:
    """Display signals plus session state."""
    state = scheduler.state
    source = scheduler.source
    signals = state.signals
    return {
        "state": state.session.value,
        "source": source.kind.value if source else None,
        "source_loaded_at_ms": source.loaded_at_ms if source else None,
        "current_time": signals.current_time,
        "current_power_kwh": signals.current_power,
        "current_temp_celsius": signals.current_temperature,
        "last_update": signals.last_update,
        "window_size": len(scheduler.snapshot()),
        "tick_count": state.tick_count,
        "last_error": state.last_error or None,
    }


def chart_payload(projector: ViewProjector) -> dict:
    series = {}
    for metric in Metric:
        series[metric.value] = {
            "points": projector.polyline_points(metric),
            "markers": [
                {
                    "key": p.key,
                    "x": p.x,
                    "y": p.y,
                    "value": p.value,
                    "display_time": p.display_time,
                }
                for p in projector.markers(metric)
            ],
        }
    return {
        "width": projector.chart_width(),
        "sample_count": len(projector),
        "series": series,
        "labels": [
            {"key": label.key, "x": label.x, "display_time": label.display_time}
            for label in projector.axis_labels()
        ],
    }


def table_payload(projector: ViewProjector, paginator: TablePaginator) -> dict:
    record_count = len(projector)
    rows = paginator.paginate(projector.recent_rows())
    return {
        "rows": [row.to_dict() for row in rows],
        "current_page": paginator.current_page,
        "items_per_page": paginator.items_per_page,
        "page_sizes": list(PAGE_SIZES),
        "total_pages": paginator.total_pages(record_count),
        "page_numbers": paginator.page_numbers(record_count),
        "record_count": record_count,
    }


def _projector(request: Request) -> ViewProjector:
    scheduler = request.app.state.scheduler
    return ViewProjector(
        scheduler.snapshot(),
        chart_width=request.app.state.config.dashboard.chart_width,
    )


# ── Status ───────────────────────────────────────────

@router.get("/status")
async def get_status(request: Request) -> dict:
    """Current display signals and session state."""
    return status_payload(request.app.state.scheduler)


@router.post("/reload")
async def reload_feed(request: Request) -> dict:
    """Run a fresh feed load; the only way back from synthetic data."""
    scheduler = request.app.state.scheduler
    await scheduler.reload()
    return status_payload(scheduler)


# ── Chart ────────────────────────────────────────────

@router.get("/chart")
async def get_chart(request: Request) -> dict:
    """Polylines, data-point markers and axis labels for both metrics."""
    return chart_payload(_projector(request))


# ── Table ────────────────────────────────────────────

@router.get("/table")
async def get_table(request: Request) -> dict:
    return table_payload(_projector(request), request.app.state.paginator)


@router.post("/table/page")
async def change_page(request: Request, body: PageRequest) -> dict:
    """Move to another page; out-of-range pages leave the table unchanged."""
    projector = _projector(request)
    paginator = request.app.state.paginator
    paginator.change_page(body.page, len(projector))
    return table_payload(projector, paginator)


@router.post("/table/page-size")
async def change_page_size(request: Request, body: PageSizeRequest):
    paginator = request.app.state.paginator
    try:
        paginator.change_page_size(body.size)
    except ValueError as exc:
        return JSONResponse({"status": "error", "error": str(exc)}, 422)

    # Remember the choice across restarts
    config_manager = request.app.state.config_manager
    if config_manager is not None:
        try:
            request.app.state.config = config_manager.save_user_config(
                {"dashboard": {"default_page_size": body.size}}
            )
        except OSError as exc:
            logger.warning("Could not persist page size %d: %s", body.size, exc)
    return table_payload(_projector(request), paginator)


# ── Logs ─────────────────────────────────────────────

@router.get("/logs")
async def get_logs(
    request: Request,
    limit: int = Query(200, ge=1, le=1000),
    level: str = "",
    source: str = "",
) -> dict:
    """Recent log entries, optionally only those tagged with one feed source."""
    records = log_buffer.get_records(limit=limit, level=level or None, source=source or None)
    return {"records": records}


# ── Config ───────────────────────────────────────────

@router.get("/config")
async def get_config(request: Request) -> dict:
    return request.app.state.config.model_dump()
