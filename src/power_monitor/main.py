"""Power Monitor application entry point and lifecycle orchestrator.

Startup sequence:
  config → logging → feed fetcher → sampling scheduler → dashboard
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
from pathlib import Path

from power_monitor import __version__
from power_monitor.config.manager import ConfigManager
from power_monitor.config.schema import AppConfig
from power_monitor.feed.fetcher import create_fetcher
from power_monitor.logging.structured import setup_logging
from power_monitor.sampling.scheduler import SamplingScheduler

logger = logging.getLogger(__name__)


class Application:
    """Main application lifecycle manager.

    Wires the feed, scheduler and dashboard together and manages
    startup/shutdown ordering.
    """

    def __init__(self, config: AppConfig, config_manager: ConfigManager) -> None:
        self.config = config
        self.config_manager = config_manager
        self._running = False
        self._tasks: list[asyncio.Task] = []

        # References held for cleanup
        self._fetcher = None
        self._scheduler: SamplingScheduler | None = None
        self._server = None

    @property
    def scheduler(self) -> SamplingScheduler | None:
        return self._scheduler

    def build_scheduler(self) -> SamplingScheduler:
        """Create the feed fetcher and the scheduler that owns it."""
        self._fetcher = create_fetcher(self.config.feed)
        self._scheduler = SamplingScheduler(self.config, self._fetcher)
        return self._scheduler

    async def start(self) -> None:
        """Start all application components in dependency order."""
        logger.info("Starting Power Monitor v%s", __version__)
        self._running = True

        # ── 1. Scheduler (initial load + ticks) ──────────────
        scheduler = self.build_scheduler()
        self._tasks.append(asyncio.create_task(scheduler.run()))

        # ── 2. Dashboard ─────────────────────────────────────
        from power_monitor.dashboard.app import create_app

        app = create_app(self.config, scheduler, config_manager=self.config_manager)
        app.state.application = self

        import uvicorn

        uvi_config = uvicorn.Config(
            app,
            host=self.config.dashboard.host,
            port=self.config.dashboard.port,
            log_level="warning",
        )
        server = uvicorn.Server(uvi_config)
        # Keep process signal handling in main() so Ctrl+C behaviour is predictable.
        server.install_signal_handlers = lambda: None
        self._server = server

        logger.info(
            "Dashboard available at http://%s:%d",
            self.config.dashboard.host,
            self.config.dashboard.port,
        )

        # Server.serve() blocks until shutdown
        await server.serve()

    async def stop(self) -> None:
        """Gracefully stop all components in reverse order."""
        if not self._running:
            return

        logger.info("Shutting down Power Monitor")
        self._running = False

        if self._server is not None:
            self._server.should_exit = True

        # Scheduler teardown cancels its clock and sampling loops together
        if self._scheduler:
            self._scheduler.stop()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

        if self._fetcher is not None:
            try:
                await self._fetcher.close()
            except Exception:
                logger.exception("Error closing feed fetcher")

        self._server = None
        logger.info("Shutdown complete")

    def request_stop(self) -> None:
        """Signal-safe shutdown trigger: ends serve(); start()'s caller then runs stop()."""
        logger.info("Stop requested")
        if self._server is not None:
            self._server.should_exit = True
        if self._scheduler is not None:
            self._scheduler.stop()


async def _serve(app: Application) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops have no signal handlers; Ctrl+C arrives as KeyboardInterrupt
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, app.request_stop)
    try:
        await app.start()
    finally:
        await app.stop()


def main() -> None:
    """Entry point for the application."""
    config_manager = ConfigManager(
        Path(os.environ.get("POWER_MONITOR_DEFAULTS", "config.defaults.yaml")),
        Path(os.environ.get("POWER_MONITOR_CONFIG", "config.yaml")),
    )
    config = config_manager.load()
    setup_logging(config.logging)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_serve(Application(config, config_manager)))


if __name__ == "__main__":
    main()
