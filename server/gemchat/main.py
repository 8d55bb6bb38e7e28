import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi import APIRouter

from .config import Settings, get_settings

# API routers
from .api.v1.chat import router as chat_router
from .api.v1.conversations import router as conversations_router
from .core.logging import setup_logging
from .db.session import Database, DEFAULT_DATABASE_URL
from .providers.base import TextProvider
from .providers.gemini import GeminiProvider
from .providers.mock import MockProvider
from .services.chat import ChatService
from .store.base import ChatStore
from .store.memory import MemoryChatStore
from .store.sql import SQLChatStore

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ChatStore:
    if settings.is_development_mode:
        store = MemoryChatStore()
        if settings.seed_demo_data:
            store.seed_demo_data(settings.default_owner_id)
        return store
    return SQLChatStore(Database(settings.database_url or DEFAULT_DATABASE_URL))


def build_provider(settings: Settings) -> TextProvider:
    if settings.is_development_mode:
        return MockProvider()
    return GeminiProvider(
        api_key=settings.resolved_gemini_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
    )


def _log_mode(settings: Settings) -> None:
    if settings.is_development_mode:
        logger.info("Running in DEVELOPMENT MODE with in-memory storage and mock AI replies")
        logger.info("To enable production mode, configure DATABASE_URL and GEMINI_API_KEY")
    else:
        logger.info("Running in PRODUCTION MODE with real services")
        logger.info("Database URL configured: %s", bool(settings.database_url))
        logger.info("Gemini API key configured: %s", bool(settings.resolved_gemini_key))


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ChatStore] = None,
    provider: Optional[TextProvider] = None,
) -> FastAPI:
    settings = settings or get_settings()
    # Setup logging early
    setup_logging(settings.log_level.upper())
    _log_mode(settings)

    app = FastAPI(title="Gemchat Server", version=VERSION)

    store = store or build_store(settings)
    provider = provider or build_provider(settings)
    app.state.settings = settings
    app.state.store = store
    app.state.chat_service = ChatService(
        store,
        provider,
        max_attempts=settings.ai_max_attempts,
        base_delay=settings.ai_base_delay,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(o).rstrip("/") for o in settings.allowed_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API v1
    api_v1 = APIRouter()
    api_v1.include_router(chat_router, prefix="/v1")
    api_v1.include_router(conversations_router, prefix="/v1")
    app.include_router(api_v1, prefix="/api")

    @app.on_event("startup")
    async def _startup() -> None:
        # Ensure tables exist
        await app.state.store.init()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.store.close()

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/")
    def root():
        mode = "development" if settings.is_development_mode else "production"
        return {"service": "gemchat", "version": VERSION, "mode": mode}

    return app


app = create_app()
