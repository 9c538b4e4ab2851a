"""Entry point for the Chat API server.

Launches the FastAPI application with Uvicorn.  Host and port come
from ``HOST`` and ``PORT`` (defaults ``0.0.0.0`` and ``8000``); see
``chat_api/app/core/config.py`` for the other supported variables.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from chat_api.app.core.config import settings


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app="chat_api.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
