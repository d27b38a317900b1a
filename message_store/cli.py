"""
Command line entry point.

    message-store serve      apply migrations, then serve HTTP
    message-store migrate    apply migrations and exit
"""
import argparse
import sys
from typing import List, Optional

from message_store.core.config import get_settings
from message_store.service import MessageStoreService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="message-store",
        description="Queued chat message store service",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Apply migrations, then serve HTTP")
    serve.add_argument("--host", help="Listen host (default: HOST)")
    serve.add_argument("--port", type=int, help="Listen port (default: PORT)")
    serve.add_argument(
        "--skip-migrations",
        action="store_true",
        help="Start without touching the schema",
    )

    subparsers.add_parser("migrate", help="Apply migrations and exit")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.command == "serve":
        overrides = {}
        if args.host is not None:
            overrides["host"] = args.host
        if args.port is not None:
            overrides["port"] = args.port
        if overrides:
            settings = settings.model_copy(update=overrides)

        service = MessageStoreService(settings)
        if not args.skip_migrations:
            service.migrate()
        service.listen()
        return 0

    service = MessageStoreService(settings)
    try:
        return 0 if service.migrate() else 1
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
