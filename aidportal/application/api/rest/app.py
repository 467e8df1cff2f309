import logging
from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aidportal.application.api.v1.errors import map_error
from aidportal.application.api.v1.routes import (
    admin,
    attachments,
    auth,
    health,
    requests,
    rules,
)
from aidportal.application.di import create_container
from aidportal.config import Config, configure_logging
from aidportal.domain.shared.authorization.startup import validate_all_handlers
from aidportal.domain.shared.error import AidPortalError
from aidportal.infrastructure.event.worker import WorkerPool
from aidportal.util.di.fastapi import setup_dishka

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: AsyncContainer = app.state.dishka_container
    config = await container.get(Config)

    if config.worker.enabled:
        worker_pool = await container.get(WorkerPool)
        async with worker_pool:
            yield
    else:
        yield

    await container.close()


def create_app(config: Config | None = None, container: AsyncContainer | None = None) -> FastAPI:
    """Create the FastAPI application.

    Serve with `uvicorn --factory aidportal.application.api.rest.app:create_app`.
    """
    config = config or Config()  # type: ignore[call-arg]

    configure_logging(config.logging)
    logger.info("Starting %s v%s", config.server.name, config.server.version)

    # Fail fast on handlers without an authorization gate
    validate_all_handlers()

    app_instance = FastAPI(
        title=config.server.name,
        description=config.server.description,
        version=config.server.version,
        lifespan=lifespan,
    )

    logfire.instrument_httpx()
    logfire.instrument_fastapi(app_instance)

    setup_dishka(container or create_container(config), app_instance)

    app_instance.include_router(health.router, prefix="/api/v1")
    app_instance.include_router(auth.router, prefix="/api/v1")
    app_instance.include_router(rules.router, prefix="/api/v1")
    app_instance.include_router(attachments.router, prefix="/api/v1")
    app_instance.include_router(requests.router, prefix="/api/v1")
    app_instance.include_router(admin.router, prefix="/api/v1")

    @app_instance.exception_handler(AidPortalError)
    async def portal_error_handler(request: Request, exc: AidPortalError):
        http_exc = map_error(exc)
        if http_exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content=http_exc.detail,
            headers=http_exc.headers,
        )

    @app_instance.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app_instance
