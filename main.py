from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dishka.integrations.fastapi import setup_dishka

from core.container import container
from core.environment.config import ExplorerCredentials
from core.exception_handler import (
    validation_exception_handler,
    http_exception_handler,
    starlette_exception_handler,
    custom_exception_handler
)
from core.exceptions import BaseCustomException
from explorer.router import router as tools_router
from explorer.services import ExplorerService

VERSION = "1.2.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Resolve credentials and the explorer service before serving.

    Startup fails with ``ConfigurationException`` when no API key is set.
    The container is closed on shutdown.
    """
    app_container: AsyncContainer = app.state.dishka_container
    await app_container.get(ExplorerCredentials, component="environment")
    await app_container.get(ExplorerService, component="explorer")
    yield
    await app_container.close()


def create_app(app_container: AsyncContainer) -> FastAPI:
    app = FastAPI(
        title="Blockchain Explorer Tool Service",
        version=VERSION,
        description="Explorer data for Ethereum, Sonic and Base exposed as agent tools",
        lifespan=lifespan,
    )

    setup_dishka(app_container, app)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_exception_handler)
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(Exception, custom_exception_handler)

    app.include_router(tools_router)

    @app.get("/")
    async def root():
        """
        Root endpoint.

        Returns
        -------
        dict
            Application information
        """
        return {
            "name": "Blockchain Explorer Tool Service",
            "version": VERSION,
            "endpoints": {
                "tools": "/api/tools",
                "call": "/api/tools/call",
                "docs": "/docs"
            }
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    return app


app = create_app(container)
