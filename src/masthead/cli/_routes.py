"""``masthead routes``: list registered routes."""

import argparse

from masthead.cli._build import build_app


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATH, KIND and handler name."""
    app = build_app(args)

    rows: list[tuple[str, str, str, str]] = []
    for route in app.routes:
        methods_str = ", ".join(sorted(route.methods))
        handler_name = getattr(route.handler, "__name__", str(route.handler))
        if route.name:
            handler_name = f"{handler_name} ({route.name})"
        rows.append((methods_str, route.path, str(route.kind), handler_name))

    if not rows:
        print("No routes registered.")
        return

    max_methods = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header
    max_kind = max(max(len(r[2]) for r in rows), 4)  # "KIND" header

    fmt = f"{{:<{max_methods}}}  {{:<{max_path}}}  {{:<{max_kind}}}  {{}}"
    print(fmt.format("METHOD", "PATH", "KIND", "HANDLER"))
    sep_len = max_methods + max_path + max_kind + 6 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
