"""Entry point for the rental service.

This script launches the FastAPI application with uvicorn.  It is
intended to be executed from the project root, for example in a Docker
container where only a single Python file is specified as the command.

Configuration such as ``DATABASE_URL``, ``LOG_LEVEL``, ``SERVICE_HOST``
and ``SERVICE_PORT`` is read from environment variables by
``rentals_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from rentals_api.app.core.config import settings
from rentals_api.app.main import app


async def run_api() -> None:
    """Serve the rentals API until the process is stopped."""
    config = Config(
        app=app,
        host=settings.service_host,
        port=settings.service_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("Rentals API stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
