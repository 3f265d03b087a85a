"""Server-Sent Events for live dashboard updates."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, Request
from starlette.responses import StreamingResponse

from power_monitor.dashboard.routes.api import chart_payload, status_payload
from power_monitor.views.projector import ViewProjector

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/events")
async def event_stream(request: Request, once: bool = False) -> StreamingResponse:
    """SSE endpoint pushing status and chart data every sse_interval_seconds."""
    scheduler = request.app.state.scheduler
    config = request.app.state.config
    interval = config.dashboard.sse_interval_seconds

    async def generate():
        while True:
            if await request.is_disconnected():
                break

            try:
                projector = ViewProjector(
                    scheduler.snapshot(),
                    chart_width=config.dashboard.chart_width,
                )
                data = {
                    "status": status_payload(scheduler),
                    "chart": chart_payload(projector),
                }
                yield f"data: {json.dumps(data)}\n\n"
            except Exception as e:
                logger.error("SSE error: %s", e)
                yield f"data: {json.dumps({'error': str(e)})}\n\n"

            if once:
                break
            await asyncio.sleep(interval)

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
