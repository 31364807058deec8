#!/usr/bin/env python3
"""
Blog API -- multi-user blogging backend.

Usage:
  python main.py
  python main.py --port 9000
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY              Token signing key, at least 32 characters. Required
                          unless DEBUG=true.
  DATABASE_URL            SQLAlchemy URL shared by both stores. Default: SQLite
                          files next to auth/store.py and blog/store.py.
  PORT                    Default port when --port is not given (8080).
  LOGIN_CHECKS_PASSWORD   true to verify passwords on login.
  ENFORCE_OWNERSHIP       true to restrict deletes to the resource owner.
  UNAUTHORIZED_STATUS_CODE  401 to reject bad tokens with a 401 instead of 200.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the blog API server.")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    args = parser.parse_args()

    print(f"Server is running on port {args.port}")
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
