"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogdemo.api.routes import articles, comments, health, metrics
from blogdemo.core.config import get_settings
from blogdemo.core.errors import (InvalidAttributeValue, ParameterMissing,
                                  RecordNotFound, UnpermittedParameters)
from blogdemo.core.logging_config import LoggingConfig
from blogdemo.core.metrics import parameter_errors_total
from blogdemo.core.middleware import LoggingContextMiddleware
from blogdemo.core.middleware_metrics import MetricsMiddleware

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    yield
    logger.info(f"Shutting down {settings.app_name}...")


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Strong parameters demo: filtering request input before mass assignment",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    parameter_errors_total.labels(error_type=type(exc).__name__).inc()
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "type": type(exc).__name__},
    )


@app.exception_handler(ParameterMissing)
async def parameter_missing_handler(request: Request, exc: ParameterMissing):
    logger.info("Required parameter missing", extra={"param": exc.param})
    return _error_response(400, exc)


@app.exception_handler(UnpermittedParameters)
async def unpermitted_parameters_handler(request: Request, exc: UnpermittedParameters):
    logger.info("Rejected unpermitted parameters", extra={"keys": exc.params})
    return _error_response(400, exc)


@app.exception_handler(InvalidAttributeValue)
async def invalid_attribute_value_handler(request: Request, exc: InvalidAttributeValue):
    logger.info("Invalid attribute value", extra={"attribute": exc.attribute})
    return _error_response(422, exc)


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound):
    return _error_response(404, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors (ForbiddenAttributesError, UnknownAttributeError, ...) and answer 500"""
    logger.error(
        "Unhandled exception",
        exc_info=True,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return _error_response(500, exc)


app.include_router(articles.router)
app.include_router(comments.router)
app.include_router(health.router)
app.include_router(metrics.router)
