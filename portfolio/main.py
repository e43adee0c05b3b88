import os
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.api.admin import email_router, router as admin_router
from portfolio.api.auth import router as auth_router
from portfolio.api.contact import router as contact_router
from portfolio.api.pages import router as pages_router
from portfolio.api.public import router as public_router
from portfolio.api.theme import router as theme_router
from portfolio.config import Settings, get_settings
from portfolio.database import connect_with_retry, init_db, make_engine
from portfolio.services.seed import seed_defaults
from portfolio.storage.base import Storage, StorageError
from portfolio.storage.memory import MemStorage
from portfolio.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_storage(settings: Settings) -> Storage:
    """Pick the backend once, at startup."""
    if settings.storage_backend == "memory":
        storage = MemStorage()
        seed_defaults(storage, settings, with_samples=True)
        return storage

    if settings.storage_backend != "database":
        raise ValueError(f"Unknown STORAGE_BACKEND '{settings.storage_backend}' (use 'memory' or 'database')")
    if not settings.database_url:
        raise ValueError("DATABASE_URL environment variable is required for the database backend")

    logger.info("Connecting to database...")
    engine = make_engine(settings.database_url)
    connect_with_retry(engine, settings.db_connect_retries, settings.db_connect_backoff)
    init_db(engine)

    storage = SqlStorage(engine)
    seed_defaults(storage, settings)
    return storage


def _field_errors(exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return errors


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Portfolio API",
        docs_url=None if settings.is_prod else "/docs",
        redoc_url=None if settings.is_prod else "/redoc",
    )
    app.state.settings = settings
    app.state.storage = storage or build_storage(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(contact_router)
    app.include_router(public_router)
    app.include_router(admin_router)
    app.include_router(email_router)
    app.include_router(theme_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "storage": app.state.storage.name}

    app.include_router(pages_router)

    if settings.static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid form data", "errors": _field_errors(exc)},
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})

    # API errors as JSON, custom 404 page for everything else
    @app.exception_handler(StarletteHTTPException)
    async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if request.url.path.startswith("/api/"):
            return JSONResponse(
                status_code=exc.status_code,
                content={"success": False, "message": exc.detail},
                headers=getattr(exc, "headers", None),
            )
        not_found_page = settings.static_dir / "pages" / "404.html"
        if exc.status_code == 404 and not_found_page.is_file():
            return FileResponse(not_found_page, status_code=404)
        return await http_exception_handler(request, exc)

    return app


def run():
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "portfolio.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
    )


if __name__ == "__main__":
    run()
