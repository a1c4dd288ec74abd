"""Command line entry point.

Usage:
    python -m complaint_tracker serve [--host HOST] [--port PORT]
    python -m complaint_tracker create-admin --username U --email E --password P --full-name N
"""

import argparse
import asyncio
import logging
import sys

from complaint_tracker.config import settings

logger = logging.getLogger("complaint_tracker.cli")


def serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "complaint_tracker.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )
    return 0


async def _create_admin(args: argparse.Namespace) -> int:
    from complaint_tracker.auth.service import IdentityService
    from complaint_tracker.database import identity_store
    from complaint_tracker.errors import ComplaintTrackerError

    await identity_store.init_schema()
    try:
        async with identity_store.session_factory() as db:
            user_id = await IdentityService(settings).create_admin(
                db,
                username=args.username,
                email=args.email,
                password=args.password,
                full_name=args.full_name,
            )
    except ComplaintTrackerError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await identity_store.dispose()

    print(f"Created admin '{args.username}' (id={user_id})")
    return 0


def create_admin(args: argparse.Namespace) -> int:
    return asyncio.run(_create_admin(args))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="complaint_tracker", description="Complaint tracker service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.backend_host)
    serve_parser.add_argument("--port", type=int, default=settings.backend_port)
    serve_parser.set_defaults(func=serve)

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", required=True)
    admin_parser.add_argument("--full-name", required=True)
    admin_parser.set_defaults(func=create_admin)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
