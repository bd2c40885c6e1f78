"""Точка сборки приложения: настройки, БД, логирование, middleware, роутеры."""
import logging
import sys
import time
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskboard import __version__
from taskboard.auth.routers import router as auth_router
from taskboard.config import DEFAULT_SECRET_KEY, Settings
from taskboard.database import build_session_factory, create_db_engine
from taskboard.tasks.routers import router as tasks_router
from taskboard.teams.routers import router as teams_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger("taskboard").setLevel(settings.log_level.upper())

    # Меньше шума от библиотек
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    response.headers["Content-Security-Policy"] = "default-src 'self'"
    return response


def limit_body_size(max_bytes: int):
    async def check_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > max_bytes:
            logger.warning("Rejected %s %s: body of %s bytes", request.method, request.url.path, length)
            return JSONResponse(status_code=413, content={"detail": "Request body too large"})
        return await call_next(request)

    return check_body_size


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"detail": str(exc) or exc.__class__.__name__}
        if settings.is_development:
            content["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return JSONResponse(status_code=500, content=content)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    if settings.environment == "production" and settings.secret_key == DEFAULT_SECRET_KEY:
        raise RuntimeError("TASKBOARD_SECRET_KEY must be set in production")

    app = FastAPI(
        title="Taskboard API",
        description="Задачи и команды с правами доступа по ролям",
        version=__version__
    )

    engine = create_db_engine(settings.database_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(limit_body_size(settings.max_body_size))
    app.middleware("http")(add_security_headers)
    if settings.is_development:
        app.middleware("http")(log_requests)

    _register_exception_handlers(app, settings)

    # Подключаем роутеры
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(teams_router)

    @app.get("/")
    def root():
        """Корневой эндпоинт с информацией о API"""
        return {
            "message": "Taskboard API - используйте /docs для тестирования",
            "status": "ok",
            "version": __version__,
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "version": __version__, "service": "Taskboard API"}

    logger.info("Taskboard started in %s mode", settings.environment)
    return app


def run():
    import uvicorn

    uvicorn.run(create_app(), host="127.0.0.1", port=8000)


if __name__ == "__main__":
    run()
