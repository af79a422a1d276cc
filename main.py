import logging
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
import firebase_admin
from fastapi import FastAPI
from firebase_admin import credentials
from starlette.middleware.cors import CORSMiddleware

from components.context import FeedContext
from config import Settings
from dependencies import mount_root_view
from routes.feed import router as feed_router
from services.firestore import FirestoreStore
from services.rest_store import RestStore
from services.store import MemoryStore, Store

logger = logging.getLogger(__name__)


def decline(message: str) -> bool:
    """Confirmation used when a request does not answer the prompt itself"""
    return False


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """
    Build the feed application

    Args:
        settings: Runtime settings, read from the environment when omitted
        store: A ready store to use instead of building one from settings

    Returns:
        The configured FastAPI app
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = None
        firebase_app = None
        feed_store = store

        if feed_store is None:
            if settings.store_backend == "firestore":
                cred = credentials.Certificate(settings.firebase_credentials)
                firebase_app = firebase_admin.initialize_app(cred)
                feed_store = FirestoreStore(firebase_app)
            elif settings.store_backend == "rest":
                if not settings.rest_url or not settings.rest_key:
                    raise ValueError("FEED_REST_URL and FEED_REST_KEY are required for the rest backend")
                timeout = aiohttp.ClientTimeout(total=settings.rest_timeout) if settings.rest_timeout else None
                session = aiohttp.ClientSession()
                feed_store = RestStore(session, settings.rest_url, settings.rest_key, timeout=timeout)
            else:
                feed_store = MemoryStore()

        logger.info("Using %s store", feed_store.__class__.__name__)

        app.state.session = session
        app.state.store = feed_store
        app.state.feed_context = FeedContext.for_store(feed_store, confirm=decline)
        mount_root_view(app)

        yield

        # Cleanup resources
        await app.state.feed_context.scheduler.drain()
        await feed_store.close()
        if session is not None:
            await session.close()
        if firebase_app is not None:
            firebase_admin.delete_app(firebase_app)

    app = FastAPI(title="Social Feed", lifespan=lifespan)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    app.include_router(feed_router, prefix="/feed", tags=["feed"])

    return app


settings = Settings.from_env()

logging.basicConfig(level=settings.log_level,
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app(settings)
