import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from employee_imports.core.config import settings
from employee_imports.core.logging import configure_logging, logger
from employee_imports.api.router import api_router
from employee_imports.db.session import engine
from employee_imports.db.base import Base
from employee_imports.db import models  # noqa: F401

def create_app() -> FastAPI:
    configure_logging(settings.ENV)
    app = FastAPI(title="Employee Imports", version="0.1.0")

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _request_context(request: Request, call_next):
        # every log line emitted while serving the request carries its route
        with structlog.contextvars.bound_contextvars(method=request.method, path=request.url.path):
            return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        # malformed bodies are client errors like any other invalid input
        issues = [{"path": ".".join(str(p) for p in e["loc"]), "message": e["msg"]} for e in exc.errors()]
        return JSONResponse(status_code=400, content={"detail": {"error": "Données invalides", "issues": issues}})

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("unhandled_error", method=request.method, path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "Erreur serveur"})

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.on_event("startup")
    def _startup():
        # Ensure tables exist for dev-only convenience
        if settings.ENV == "dev" and settings.CREATE_TABLES:
            Base.metadata.create_all(bind=engine)

    app.include_router(api_router)
    logger.info("app_started", env=settings.ENV)
    return app

app = create_app()
