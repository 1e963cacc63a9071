# limocontrol/main.py
import datetime as dt

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings
from .deps import get_current_identity
from .logging_config import configure_logging, get_logger
from .store import Store, build_store
from .store.seed import seed_store

from .routers import (
    auth as auth_router,
    users as users_router,
    drivers as drivers_router,
    clients as clients_router,
    companies as companies_router,
    trips as trips_router,
    dashboard as dashboard_router,
)

logger = get_logger(__name__)


def _warn_about_config(cfg: Settings) -> None:
    if not cfg.JWT_SECRET or cfg.JWT_SECRET == "change-me":
        logger.warning("JWT_SECRET is not set. Set a strong secret in env.")
    if cfg.ALLOWED_ORIGINS.strip() in ("", "*"):
        logger.warning("ALLOWED_ORIGINS not restricted: any origin is allowed")


def create_app(cfg: Settings | None = None, store: Store | None = None) -> FastAPI:
    cfg = cfg or settings
    configure_logging(level=cfg.LOG_LEVEL)
    _warn_about_config(cfg)

    app = FastAPI(title="LimoControl API")
    app.state.settings = cfg
    app.state.store = store if store is not None else build_store(cfg)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Errors: every failure body is {"error": ...} ---
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request", "details": jsonable_encoder(exc.errors())}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # --- Public ---
    @app.get("/", include_in_schema=False)
    def index():
        return {"name": "LimoControl API", "status": "ok", "health": "/health", "login": "POST /auth/login"}

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": dt.datetime.now(dt.timezone.utc).isoformat()}

    app.include_router(auth_router.router)

    # --- Everything below requires a bearer token ---
    authed = [Depends(get_current_identity)]
    app.include_router(users_router.router, dependencies=authed)
    app.include_router(drivers_router.router, dependencies=authed)
    app.include_router(clients_router.router, dependencies=authed)
    app.include_router(companies_router.router, dependencies=authed)
    app.include_router(trips_router.router, dependencies=authed)
    app.include_router(dashboard_router.router, dependencies=authed)

    # --- DB init + seed ---
    @app.on_event("startup")
    def on_startup():
        app.state.store.init()
        seed_store(app.state.store, cfg)
        logger.info("API ready (%s store)", app.state.store.backend)

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.store.close()

    return app


app = create_app()
