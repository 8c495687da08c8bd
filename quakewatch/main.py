from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quakewatch.api.router import api_router
from quakewatch.core.config import get_settings
from quakewatch.core.errors import InsufficientDataError, InvalidParameterError
from quakewatch.core.log_config import configure_logging
from quakewatch.observability.metrics import PrometheusMiddleware, metrics_response
from quakewatch.observability.tracing import setup_tracing

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)
app.include_router(api_router)
if settings.metrics_enabled:
    app.add_middleware(PrometheusMiddleware)
setup_tracing(app)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.app_name}


@app.get("/metrics", include_in_schema=False)
def metrics():
    return metrics_response()


@app.exception_handler(InsufficientDataError)
async def insufficient_data_handler(_: Request, exc: InsufficientDataError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "rows": exc.rows, "min_rows": exc.min_rows},
    )


@app.exception_handler(InvalidParameterError)
async def invalid_parameter_handler(_: Request, exc: InvalidParameterError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "parameter": exc.name},
    )
