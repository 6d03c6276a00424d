"""Development entrypoint for the App Clash HTTP API."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from appclash.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Serve the App Clash game API")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Root log level (defaults to APPCLASH_LOG_LEVEL)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # uvicorn can only reload an app given as an import string
    target = "appclash.api.app:app" if args.reload else _load_app()
    uvicorn.run(target, host=args.host, port=args.port, reload=args.reload)


def _load_app():
    from appclash.api.app import app

    return app


if __name__ == "__main__":
    main()
