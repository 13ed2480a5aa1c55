from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from data_aggregator.services.aggregator import Aggregator

router = APIRouter()

@router.get("/health")
async def health() -> dict[str, str]:
    """
    Liveness probe.
    Returns 200 OK while the process is alive.
    """
    return {"status": "ok"}

@router.get("/ready")
async def ready(request: Request):
    """
    Readiness probe.
    Returns 200 OK with the active aggregation policies once startup has finished
    and an aggregator is installed; 503 otherwise.
    """
    ready_flag = getattr(request.app.state, "ready_flag", None)
    aggregator = getattr(request.app.state, "aggregator", None)
    if not (ready_flag and ready_flag()):
        return JSONResponse({"status": "not ready"}, status_code=HTTP_503_SERVICE_UNAVAILABLE)
    if not isinstance(aggregator, Aggregator):
        return JSONResponse(
            {"status": "not ready", "reason": "aggregator not configured"},
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
        )
    return {
        "status": "ready",
        "overflow": aggregator.overflow.value,
        "length_unit": aggregator.length_unit.value,
    }
