"""HTTP server for the faucet.

Endpoints:
- POST /faucet: Dispense tokens to ``{"address": ...}``
- GET /health: Liveness probe with timestamp
- GET /ready: Readiness probe (200 if all checks pass, 503 otherwise)
- GET /metrics: Prometheus metrics endpoint

All routes allow any origin (CORS).
"""

import uuid
from typing import Awaitable, Callable

import aiohttp_cors
from aiohttp import web
from prometheus_client import REGISTRY, generate_latest

from testnet_faucet.faucet.service import FaucetService
from testnet_faucet.observability.health import (
    HealthCheck,
    HealthStatus,
    check_readiness,
    liveness_payload,
)
from testnet_faucet.observability.logging import clear_request_id, get_logger, set_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def request_id_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Tag every log line emitted while handling a request with its ID."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    set_request_id(request_id)
    try:
        response = await handler(request)
    finally:
        clear_request_id()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


class FaucetServer:
    """HTTP front end for the faucet service.

    Parameters
    ----------
    service : FaucetService
        The dispense workflow.
    host : str
        Host to bind to.
    port : int
        Port to bind to.
    """

    def __init__(self, service: FaucetService, host: str = "127.0.0.1", port: int = 5556):
        self._service = service
        self._host = host
        self._port = port
        self._checks: list[HealthCheck] = []
        self._runner: web.AppRunner | None = None
        self._site: web.TCPSite | None = None

    def add_check(self, check: HealthCheck) -> None:
        """Add a readiness check.

        Parameters
        ----------
        check : HealthCheck
            The health check to add.
        """
        self._checks.append(check)

    def create_app(self) -> web.Application:
        """Build the aiohttp application with routes and CORS configured."""
        app = web.Application(middlewares=[request_id_middleware])
        app.router.add_post("/faucet", self._handle_faucet)
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/ready", self._handle_ready)
        app.router.add_get("/metrics", self._handle_metrics)

        cors = aiohttp_cors.setup(
            app,
            defaults={
                "*": aiohttp_cors.ResourceOptions(
                    allow_credentials=False,
                    expose_headers="*",
                    allow_headers="*",
                    allow_methods="*",
                )
            },
        )
        for route in list(app.router.routes()):
            cors.add(route)

        return app

    async def start(self) -> None:
        """Start serving."""
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()

        logger.info("Faucet server started", host=self._host, port=self._port)

    async def stop(self) -> None:
        """Stop serving and release the listening socket."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("Faucet server stopped")

    async def _handle_faucet(self, request: web.Request) -> web.Response:
        """Handle POST /faucet."""
        try:
            body = await request.json()
        except ValueError:
            return _error("Invalid request body", 400)
        if not isinstance(body, dict) or "address" not in body:
            return _error("Invalid request body", 400)

        try:
            result = await self._service.dispense(body["address"])
        except Exception:
            logger.exception("Unhandled error while dispensing")
            return _error("Internal server error", 500)

        if result.success:
            return web.json_response({"transaction_hash": result.tx_hash})
        return _error(result.message, result.status.http_status)

    async def _handle_health(self, _request: web.Request) -> web.Response:
        """Handle /health endpoint (liveness probe)."""
        return web.json_response(liveness_payload())

    async def _handle_ready(self, _request: web.Request) -> web.Response:
        """Handle /ready endpoint (readiness probe)."""
        result = await check_readiness(self._checks)

        status_code = 200 if result.status == HealthStatus.OK else 503
        return web.json_response(result.to_dict(), status=status_code)

    async def _handle_metrics(self, _request: web.Request) -> web.Response:
        """Handle /metrics endpoint (Prometheus)."""
        metrics = generate_latest(REGISTRY)
        return web.Response(
            body=metrics,
            content_type="text/plain",
            charset="utf-8",
        )
