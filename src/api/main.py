"""FastAPI application entry point."""
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from api.routers import bookmarks, folders, health
from core.config import Settings, get_settings
from db.session import Database

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Allow any origin and answer every OPTIONS request directly.

    Headers are added whether or not the request carries an Origin header, and
    OPTIONS never reaches the routers: it gets an empty 200. Errors no exception
    handler claimed are turned into a plain 500 here so that response carries the
    headers too.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Short-circuit preflight requests and add CORS headers to responses."""
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception("Unhandled error on %s %s", request.method, request.url.path)
                response = JSONResponse(
                    status_code=500, content={"detail": "Internal server error"},
                )
        response.headers.update(CORS_HEADERS)
        return response


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed bodies and parameters as 400 Bad Request."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError,
) -> JSONResponse:
    """Log store failures and answer with a plain 500."""
    logger.exception("Database error handling %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The store handle is opened in the lifespan (schema is created if missing) and
    disposed on shutdown. In production mode the built client in ``static_dir`` is
    served at ``/`` after the API routes.
    """
    app_settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Manage application lifespan - startup and shutdown."""
        database = Database(app_settings.database_url, echo=app_settings.db_echo)
        await database.create_schema()
        app.state.database = database
        logger.info("Connected to database %s", app_settings.database_url)

        yield

        await database.dispose()
        app.state.database = None

    app = FastAPI(
        title="Bookmarks API",
        description="A personal bookmark manager with folders, favorites and notes.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    app.add_middleware(CORSHeadersMiddleware)

    app.include_router(health.router)
    app.include_router(bookmarks.router)
    app.include_router(folders.router)

    if app_settings.is_production:
        static_dir = Path(app_settings.static_dir)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
            logger.info("Serving static files from %s", static_dir)
        else:
            logger.warning("Static directory %s does not exist; not serving it", static_dir)

    logger.info("Application configured in %s mode", app_settings.env)
    return app


app = create_app()
