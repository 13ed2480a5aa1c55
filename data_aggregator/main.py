import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from data_aggregator.api import data, health
from data_aggregator.config import Settings, load_settings
from data_aggregator.observability.logging import setup_logging
from data_aggregator.observability.metrics import MetricsMiddleware, metrics_router
from data_aggregator.services.aggregator import Aggregator

logger = logging.getLogger(__name__)

# READY_FLAG tells /ready whether startup has completed
READY_FLAG = False

@asynccontextmanager
async def app_lifespan(app: FastAPI):
    global READY_FLAG
    READY_FLAG = True
    logger.info("Data aggregator ready")
    yield
    READY_FLAG = False

def _serialize_error(err):
    # Validation error contexts may hold exception instances
    if isinstance(err, Exception):
        return str(err)
    if isinstance(err, dict):
        return {k: _serialize_error(v) for k, v in err.items()}
    if isinstance(err, (list, tuple)):
        return [_serialize_error(e) for e in err]
    if isinstance(err, str):
        # Echoed input may hold lone surrogates, which JSONResponse cannot encode
        return err.encode("utf-8", "backslashreplace").decode("utf-8")
    return err

# Factory function to create the FastAPI app
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    app = FastAPI(
        title="Data Aggregator Service",
        version="1.0.0",
        lifespan=app_lifespan,
    )
    app.add_middleware(MetricsMiddleware)
    app.include_router(metrics_router)     # /metrics
    app.include_router(health.router)      # /health and /ready
    app.include_router(data.router)        # /data
    app.state.ready_flag = lambda: READY_FLAG
    app.state.settings = settings
    app.state.aggregator = Aggregator(
        overflow=settings.overflow,
        length_unit=settings.length_unit,
        logger=logging.getLogger("data_aggregator.requests"),
    )
    logger.info(
        "Aggregator configured: overflow=%s length_unit=%s",
        settings.overflow.value,
        settings.length_unit.value,
    )

    # Any request that fails decoding is a 400, never a 422
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": _serialize_error(exc.errors())},
        )

    return app

app = create_app()
