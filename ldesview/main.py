"""
ldesview - read-only TREE views over append-only event streams.

Features:
- Stream, fragmentation and bucket views with cursor pagination
- Canonical stream names with permanent redirects from aliases
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from . import __version__
from .config import Settings, get_settings
from .logging import setup_logging, get_logger
from .api.router import router
from .middleware import (
    CorrelationIdMiddleware,
    ErrorHandlerMiddleware,
    MetricsMiddleware,
    register_error_handlers,
)
from .metrics import Metrics
from .health import HealthChecker
from .services import EventPager, LdesViewService
from .storage import StorageAdapter, create_storage

logger = get_logger()


def create_app(settings: Settings | None = None, storage: StorageAdapter | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration (defaults to environment settings)
        storage: Storage backend (defaults to the configured adapter)
    """
    settings = settings or get_settings()
    storage = storage or create_storage(settings)
    metrics = Metrics(service_name="ldesview", version=__version__)
    health_checker = HealthChecker(storage, service_name="ldesview", version=__version__)

    app = FastAPI(
        title="ldesview",
        version=__version__,
        description="Read-only hypermedia views over time-ordered event streams",
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.metrics = metrics
    app.state.view_service = LdesViewService(
        storage,
        pager=EventPager(settings.PAGE_SOFT_LIMIT, settings.PAGE_HARD_LIMIT),
        metrics=metrics,
    )

    # Last added runs first: correlation ID, then metrics, then error handling
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)
    register_error_handlers(app)

    app.include_router(router)
    app.mount("/metrics", make_asgi_app(registry=metrics.registry))

    @app.get("/health")
    async def health():
        """
        Liveness check: the process is up.

        Returns 200 if service is running.
        """
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready():
        """
        Readiness check: storage, disk and memory.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        metrics.update_system_metrics()
        result = await health_checker.readiness()
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(result, status_code=status_code)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "service_starting",
            version=__version__,
            env=settings.ENV,
            storage=type(storage).__name__,
            soft_limit=settings.PAGE_SOFT_LIMIT,
            hard_limit=settings.PAGE_HARD_LIMIT,
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("service_stopping")
        metrics.app_up.labels(service="ldesview", version=__version__).set(0)
        await storage.close()

    return app


def run():
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ldesview.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )


_settings = get_settings()
setup_logging(json_output=_settings.LOG_JSON, service_name="ldesview", level=_settings.LOG_LEVEL)
app = create_app(_settings)


if __name__ == "__main__":
    run()
