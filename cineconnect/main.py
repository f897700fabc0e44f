"""cineconnect FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cineconnect.api import (
    auth,
    feed,
    friends,
    groups,
    health,
    moderation,
    movies,
    notifications,
    reviews,
    users,
    ws,
)
from cineconnect.core.config import settings
from cineconnect.core.errors import install_error_handlers
from cineconnect.core.ws_manager import ChannelManager
from cineconnect.db.session import Database

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.database = Database(settings)
    app.state.channels = ChannelManager()
    logger.info("%s started (environment=%s)", settings.app_name, settings.environment)
    try:
        yield
    finally:
        await app.state.channels.close_all()
        app.state.database.dispose()
        logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(friends.router)
    app.include_router(groups.router)
    app.include_router(reviews.router)
    app.include_router(reviews.replies_router)
    app.include_router(movies.router)
    app.include_router(feed.router)
    app.include_router(notifications.router)
    app.include_router(moderation.router)
    app.include_router(ws.router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run("cineconnect.main:app", host="0.0.0.0", port=settings.port, reload=settings.is_development)
