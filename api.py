"""
FastAPI REST API for the time-series query gateway.

Serves chart queries, metric discovery for the query editor and a store
health check.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from query_gateway import QueryGateway
from query_gateway.config import GatewaySettings, setup_logging
from query_gateway.core.errors import GatewayError
from query_gateway.core.models import HealthResult, MetricsRequest, QueryDataRequest

logger = logging.getLogger("query_gateway.api")

settings = GatewaySettings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    app.state.gateway = QueryGateway.from_settings(settings)
    try:
        yield
    finally:
        app.state.gateway.close()


app = FastAPI(
    title="Time-series Query Gateway",
    description="Query time-series samples and tag metadata from MongoDB collections",
    version="1.0.0",
    lifespan=lifespan,
)


def get_gateway(request: Request) -> QueryGateway:
    """Return the gateway created at startup."""
    return request.app.state.gateway


@app.post("/query")
def query_data(request: QueryDataRequest, gateway: QueryGateway = Depends(get_gateway)) -> Dict[str, Any]:
    """
    Answer every query in the request, keyed by refId.

    A failing query yields an error payload for its refId only.
    """
    return gateway.query_data(request)


@app.post("/resources/metrics")
def metrics(request: MetricsRequest, gateway: QueryGateway = Depends(get_gateway)):
    """List time-series collections with their tag options."""
    try:
        descriptors = gateway.discover_metrics(request)
    except GatewayError as e:
        return JSONResponse(status_code=500, content={"err": e.message})

    replies: List[Dict[str, Any]] = [d.to_reply() for d in descriptors]
    logger.debug("replying to metrics request with %d metrics", len(replies))
    return replies


@app.post("/resources/{path:path}")
def unknown_resource(path: str):
    return JSONResponse(
        status_code=404,
        content={"err": f"requested non-existent resource {path}"},
    )


@app.get("/health", response_model=HealthResult)
def health(gateway: QueryGateway = Depends(get_gateway)) -> HealthResult:
    """Ping the backing store."""
    return gateway.check_health()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
