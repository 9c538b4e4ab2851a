"""
Main entrypoint for the Chat API.

This module assembles the FastAPI application: logging, CORS, the
error handler and the versioned router.  ``create_app`` builds and
configures the app, which is then instantiated at module import time
as ``app`` so it can be served directly, e.g.::

    uvicorn chat_api.app.main:app --reload

The storage and the notification channel can be passed in, which is
how the tests run the API against in‑memory fakes.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import register_error_handlers
from .core.logging_config import setup_logging
from .core.notifications import NotificationChannel, WebSocketNotifier
from .core.store import Store


def create_app(
    store: Optional[Store] = None,
    notifier: Optional[NotificationChannel] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[Store]
        Collections used by the services.  Defaults to the SQLite
        store at ``settings.database_url``.
    notifier : Optional[NotificationChannel]
        Channel receiving ``messageUpdate`` events.  Defaults to a
        ``WebSocketNotifier`` serving ``/messaging/ws``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the modules below
    # can safely log messages.
    setup_logging(settings.log_level, settings.log_file)
    logger = logging.getLogger(__name__)

    store = store or Store.sqlite()
    notifier = notifier or WebSocketNotifier()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file on first start and applies pending
        # migrations.
        app.state.store.init()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.notifier = notifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
