"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as api_router
from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.security import TokenCodec
from app.middleware.authentication import AuthenticationMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load the user data file before serving requests."""
    store: UserStore = app.state.user_store
    if not store.is_ready:
        store.init()
    logger.info("User API started (env=%s)", app.state.settings.APP_ENV)
    yield


def create_app(
    settings: Settings | None = None,
    store: UserStore | None = None,
    codec: TokenCodec | None = None,
) -> FastAPI:
    """Build the application; store and codec default to ones built from settings."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="User API",
        version="0.1.0",
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.user_store = store or UserStore(settings.USER_DATA_FILE)
    app.state.token_codec = codec or TokenCodec.from_settings(settings)

    # Starlette runs middleware in reverse order of registration:
    # CORS -> security headers -> authentication -> routes.
    app.add_middleware(AuthenticationMiddleware, codec=app.state.token_codec)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "User API"}

    return app


app = create_app()
