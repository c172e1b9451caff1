"""Command-line interface for the Google OAuth2 login demo."""

import argparse
import logging
import sys

from google0auth import __version__


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from google0auth.config import get_settings

    settings = get_settings()
    _configure_logging(settings.log_level)

    uvicorn.run(
        "google0auth.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def _routes(args: argparse.Namespace) -> int:
    from google0auth.api.app import build_access_policy

    policy = build_access_policy()
    for entry in policy.entries:
        print(f"{entry.matcher.pattern:<40} {entry.rule.value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Google OAuth2 Login Demo - two endpoints behind Google sign-in"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", help="Bind address (default: from settings)")
    serve_parser.add_argument(
        "--port", type=int, help="Bind port (default: from settings)"
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)",
    )
    serve_parser.set_defaults(handler=_serve)

    # Routes command
    routes_parser = subparsers.add_parser(
        "routes", help="Print the access policy table"
    )
    routes_parser.set_defaults(handler=_routes)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
