"""Entry point for the Boycott Catalog API.

Loads a ``.env`` file from the project root (if present) and serves
the FastAPI application with Uvicorn.  Variables must be loaded before
the application package is imported because settings are read at
import time.  See ``boycott_api/app/core/config.py`` for the supported
variables; ``HOST`` and ``PORT`` (default 3000) select the listening
address.

Usage:
    python run.py
"""
from pathlib import Path

from dotenv import load_dotenv
from uvicorn import Config, Server

load_dotenv(Path(__file__).resolve().parent / ".env")

from boycott_api.app.core.config import settings  # noqa: E402
from boycott_api.app.main import app  # noqa: E402


def main() -> None:
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    server.run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
