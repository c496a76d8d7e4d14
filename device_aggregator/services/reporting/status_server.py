"""
Status Server

Read-only HTTP view of the aggregation store:
- GET /health   - liveness and device count
- GET /readings - latest value per device
- GET /summary  - total of all latest values
"""

from datetime import datetime, timezone
from typing import Callable

from aiohttp import web

from ...common.logging_setup import get_service_logger
from ..aggregation.store import AggregationStore
from .reporter import summarize

logger = get_service_logger("reporting.status")


class StatusServer:
    """aiohttp application exposing store snapshots"""

    def __init__(
        self,
        store: AggregationStore,
        host: str = "127.0.0.1",
        port: int = 8090,
        device_names: Callable[[], list[str]] | None = None,
    ):
        self._store = store
        self.host = host
        self.port = port
        self._device_names = device_names or (lambda: [])
        self._start_time = datetime.now(timezone.utc)

        self._runner: web.AppRunner | None = None
        self.app = self.create_app()

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/health", self._health_handler)
        app.router.add_get("/readings", self._readings_handler)
        app.router.add_get("/summary", self._summary_handler)
        return app

    async def start(self) -> None:
        """Start listening"""
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()

        logger.info(f"Status server started on {self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop listening and release the socket"""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Status server stopped")

    async def _health_handler(self, request: web.Request) -> web.Response:
        """Handle health check requests"""
        uptime = (datetime.now(timezone.utc) - self._start_time).total_seconds()

        return web.json_response({
            "status": "healthy",
            "service": "device_aggregator",
            "uptime": int(uptime),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "devices": len(self._device_names()),
        })

    async def _readings_handler(self, request: web.Request) -> web.Response:
        """Return all device readings"""
        return web.json_response(self._store.snapshot())

    async def _summary_handler(self, request: web.Request) -> web.Response:
        """Return the aggregated total"""
        return web.json_response(summarize(self._store).to_dict())
