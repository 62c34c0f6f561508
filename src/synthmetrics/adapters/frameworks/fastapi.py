"""FastAPI adapter exposing the simulator over HTTP."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Response
from fastapi.responses import JSONResponse

from synthmetrics.adapters.frameworks.query_params import (
    _parse_level_param,
    _parse_since_param,
)
from synthmetrics.core.encoding import ndjson, prometheus
from synthmetrics.core.exceptions import InvalidRequestError, UnknownScenarioError
from synthmetrics.core.ports import LogStoragePort
from synthmetrics.core.scenarios import HIGH_TRAFFIC, ScenarioEngine

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def create_simulator_router(
    engine: ScenarioEngine,
    log_storage: LogStoragePort,
) -> APIRouter:
    """Create a FastAPI router with health, metrics, logs and scenario endpoints.

    Args:
        engine: Scenario engine; its registry and snapshot back the read
            endpoints and its traffic simulation backs high-traffic.
        log_storage: Storage adapter holding recent log records.

    Returns:
        APIRouter with all simulator endpoints configured.
    """
    router = APIRouter()

    @router.get("/")
    async def index() -> dict[str, Any]:
        """Describe the service and its scenarios."""
        return {
            "service": "synthmetrics",
            "status": "running",
            "scenarios": [info.name for info in engine.scenarios()],
            "endpoints": ["/api/health", "/api/metrics", "/metrics", "/logs"],
        }

    @router.get("/api/health")
    async def health() -> dict[str, Any]:
        """Health check; counts as a handled request."""
        engine.record_request("GET", "/api/health", 200)
        logger.debug("Health check request received")
        return {"status": "healthy", "metrics": engine.snapshot.to_dict()}

    @router.get("/api/metrics")
    async def aggregate_metrics() -> dict[str, Any]:
        """Return the aggregate snapshot without side effects."""
        return engine.snapshot.to_dict()

    @router.get("/api/error")
    async def error_endpoint() -> JSONResponse:
        """Always fail with 500, counting the request and the error."""
        error_count = engine.record_api_error()
        logger.error("Error endpoint called", extra={"error_count": error_count})
        return JSONResponse(
            status_code=500,
            content={"error": "Something went wrong", "errorCount": error_count},
        )

    @router.get("/metrics")
    async def prometheus_metrics() -> Response:
        """Return metrics in Prometheus text format."""
        try:
            body = engine.registry.render()
        except Exception as e:
            logger.exception("Error encoding metrics endpoint")
            return _error(500, str(e) or type(e).__name__)
        return Response(content=body, media_type=prometheus.CONTENT_TYPE)

    @router.get("/logs")
    async def get_logs(
        since: Annotated[str | None, Query()] = None,
        level: Annotated[str | None, Query()] = None,
    ) -> Response:
        """Return recent log records in NDJSON format.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
            level: Optional level filter (INFO, WARN, ERROR).
        """
        entries = log_storage.read(
            since=_parse_since_param(since), level=_parse_level_param(level)
        )
        return Response(content=ndjson.encode_logs(entries), media_type=ndjson.CONTENT_TYPE)

    @router.get("/api/scenarios")
    async def list_scenarios() -> list[dict[str, Any]]:
        """List scenario names with their sizing parameter and default."""
        return [
            {
                "name": info.name,
                "parameter": info.parameter,
                "default": info.default,
                "description": info.description,
            }
            for info in engine.scenarios()
        ]

    @router.post("/api/scenarios/{name}")
    async def run_scenario(
        name: str,
        body: Annotated[dict[str, Any] | None, Body()] = None,
    ) -> Any:
        """Run a scenario; body is {"count": n} or {"duration": seconds}."""
        endpoint = f"/api/scenarios/{name}"
        try:
            result = engine.run(name, body)
        except UnknownScenarioError as e:
            return _error(404, str(e))
        except InvalidRequestError as e:
            engine.record_request("POST", endpoint, 400)
            logger.warning("Rejected scenario request: %s", e, extra={"scenario": name})
            return _error(400, str(e))
        engine.record_request("POST", endpoint, 200)
        return result.to_dict()

    @router.delete(f"/api/scenarios/{HIGH_TRAFFIC}")
    async def stop_high_traffic() -> dict[str, Any]:
        """Stop a running high-traffic simulation."""
        stopped = engine.traffic.stop() if engine.traffic is not None else False
        message = (
            "High traffic simulation stopped"
            if stopped
            else "No high traffic simulation was running"
        )
        return {"message": message, "stopped": stopped, "metrics": engine.snapshot.to_dict()}

    return router
