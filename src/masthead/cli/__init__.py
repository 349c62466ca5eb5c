"""Masthead CLI: dev server and route listing.

Entry point registered as ``masthead`` in ``pyproject.toml``::

    [project.scripts]
    masthead = "masthead.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``masthead`` command."""
    parser = argparse.ArgumentParser(
        prog="masthead",
        description="Masthead: the site server for a small news publication.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- masthead run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the development server")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--data",
        default=None,
        help="JSON file seeding the document store (overrides MASTHEAD_DATA_FILE)",
    )

    # -- masthead routes --------------------------------------------------
    subparsers.add_parser("routes", help="List registered routes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from masthead.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from masthead.cli._routes import run_routes

        run_routes(args)
