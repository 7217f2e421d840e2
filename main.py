#!/usr/bin/env python3
"""
TokenGate -- JWT session tokens for a small set of protected routes.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --port 8080
  python main.py --reload
  python main.py --log-level debug

Environment variables (or .env):
  PORT                  Listen port (default 3000). --port overrides it.
  HOST                  Bind address (default 127.0.0.1). --host overrides it.
  JWT_SECRET            Signing secret. Unset means an insecure public default;
                        refused outright when ENVIRONMENT=production.
  TOKEN_EXPIRE_SECONDS  Token lifetime in seconds (default 3600).
  ENVIRONMENT           "development" (default) shows error detail in 500s.
  LOG_LEVEL             uvicorn log level (default info).
"""

import argparse

import uvicorn

from core.config import get_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TokenGate -- issue and verify signed session tokens.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Test login:\n"
            '  curl -X POST http://localhost:3000/api/login -H "Content-Type: application/json" \\\n'
            '       -d \'{"username": "admin", "password": "password123"}\'\n'
            "Test protected route:\n"
            '  curl http://localhost:3000/api/profile -H "Authorization: Bearer <token>"'
        ),
    )
    parser.add_argument("--host", help="Bind address (overrides HOST)")
    parser.add_argument("--port", type=int, help="Listen port (overrides PORT)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (overrides LOG_LEVEL)",
    )
    return parser


def main(argv=None) -> None:
    args = _build_parser().parse_args(argv)
    # Loading settings here makes a bad JWT_SECRET fail before uvicorn binds a port.
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    print(f"\n{'=' * 60}")
    print("TokenGate JWT Protected Routes Server")
    print(f"Server running on http://{host}:{port}")
    print(f"{'=' * 60}\n")

    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=args.log_level or settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
