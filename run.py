"""Entry point for the Library Management API.

Starts the FastAPI application under uvicorn.  Host, port, log level
and database location come from the environment (see
``library_api.app.core.config``), for example::

    DATABASE_URL=/var/lib/library/library.db SERVER_PORT=8080 python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from library_api.app.core.config import settings
from library_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.server_host,
        port=settings.server_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
