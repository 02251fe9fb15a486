#!/usr/bin/env python3
"""
Portfolio API -- operator command line.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 5000
  python main.py serve --reload
  python main.py create-user admin admin@example.com
  python main.py create-user admin admin@example.com --password s3cret

Configuration comes from the environment / .env file (see core/config.py):
  SECRET_KEY    Required unless DEBUG=true.
  DATABASE_URL  SQLAlchemy URL. Defaults to sqlite:///./portfolio.db.
  UPLOAD_DIR    Where uploaded images are written. Defaults to ./uploads.
"""

import argparse
import getpass
import sys
from typing import Optional

from auth.store import UserStore
from auth.tokens import MAX_PASSWORD_BYTES, register_user
from core.config import get_settings
from core.database import Database
from core.errors import Conflict


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _create_user(args: argparse.Namespace) -> int:
    """Register a principal through the same path as POST /api/auth/register."""
    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("  [!] Password must not be empty.", file=sys.stderr)
        return 1

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        print(f"  [!] Password must be at most {MAX_PASSWORD_BYTES} bytes.", file=sys.stderr)
        return 1

    db = Database(args.database_url or get_settings().database_url)
    try:
        user = register_user(UserStore(db), args.username.strip(), args.email.strip(), password)
    except Conflict as exc:
        print(f"  [!] {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"  Created user {user.username} (id={user.id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio",
        description="Run and administer the portfolio API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development).")
    serve.set_defaults(func=_serve)

    create = sub.add_parser("create-user", help="Register a user who can sign in to edit content.")
    create.add_argument("username")
    create.add_argument("email")
    create.add_argument("--password", help="Prompted for when omitted.")
    create.add_argument("--database-url", help="Override DATABASE_URL.")
    create.set_defaults(func=_create_user)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
