#!/usr/bin/env python3
"""
Launch the RightHome Co-pilot chat API.

Host, port and reload default to the HOST, PORT and DEBUG settings
(environment or .env); flags override them for a single run.

Usage:
    python run.py
    python run.py --port 8080 --reload
    python run.py --catalog data/listings.json
"""

import argparse
import os

import uvicorn

from righthome import __version__
from righthome.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Serve the RightHome property co-pilot chat API")
    parser.add_argument("--host", default=settings.HOST, help=f"Interface to bind (default: {settings.HOST})")
    parser.add_argument("--port", type=int, default=settings.PORT, help=f"Port to serve on (default: {settings.PORT})")
    reload_group = parser.add_mutually_exclusive_group()
    reload_group.add_argument("--reload", dest="reload", action="store_true", help="Restart on code changes")
    reload_group.add_argument("--no-reload", dest="reload", action="store_false", help="Never restart on code changes")
    parser.set_defaults(reload=settings.DEBUG)
    parser.add_argument("--catalog", help="Listings JSON file to serve instead of the packaged catalog")

    args = parser.parse_args()

    if args.catalog:
        os.environ["CATALOG_PATH"] = os.path.abspath(args.catalog)
        get_settings.cache_clear()

    print(f"RightHome Co-pilot {__version__}")
    print(f"  chat endpoint:  http://{args.host}:{args.port}/chat")
    print(f"  API docs:       http://localhost:{args.port}/docs")
    print(f"  catalog:        {get_settings().CATALOG_PATH or 'packaged listings'}")
    print(f"  LLM replies:    {'on' if settings.USE_LLM_REPLIES else 'off'}")
    print(f"  reload:         {'on' if args.reload else 'off'}\n")

    uvicorn.run(
        "righthome.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
