"""t-learn API - FastAPI app factory.

Run with `python -m tlearn` or `uvicorn tlearn.main:create_app --factory`.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tlearn.core.config import Settings, get_settings
from tlearn.core.errors import AppError, BadRequestError, InternalError, UnauthorizedError
from tlearn.db.base import Base
from tlearn.db.session import create_engine, create_sessionmaker
from tlearn.routers import admin, auth, content

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _install_error_handlers(app: FastAPI) -> None:
    """The only place where application errors become HTTP responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = None
        if isinstance(exc, UnauthorizedError):
            headers = {"WWW-Authenticate": "Bearer"}
        elif isinstance(exc, InternalError):
            logger.error(
                "internal error on %s %s: %s",
                request.method,
                request.url.path,
                exc.args[0] if exc.args else exc.detail,
                exc_info=exc.__cause__,
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=BadRequestError.status_code,
            content={"detail": BadRequestError.detail, "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("store error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": InternalError.detail})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app. Settings are resolved once here; a missing JWT_SECRET fails at this point."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_engine(settings.database_url, echo=settings.debug)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        logger.info("%s started (db dialect=%s)", settings.app_name, engine.dialect.name)

        yield

        await engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Courses, lessons and CLI-checked tasks with API key and session token auth",
        lifespan=lifespan,
    )
    app.state.settings = settings

    _install_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(content.router)
    app.include_router(admin.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
