"""``masthead run``: development server command."""

import argparse

from masthead.cli._build import build_app


def run_server(args: argparse.Namespace) -> None:
    """Build the site App and serve it with pounce.

    ``--host`` and ``--port`` override the environment.
    """
    app = build_app(args)
    app.run(host=args.host, port=args.port)
