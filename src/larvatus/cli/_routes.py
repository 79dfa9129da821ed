"""``larvatus routes``: print the route table in match order."""

import argparse

from larvatus.cli._resolve import load_app_or_exit
from larvatus.routing.route import Route


def _handler_name(route: Route) -> str:
    handler = route.handler
    return getattr(handler, "__qualname__", None) or type(handler).__name__


def run_routes(args: argparse.Namespace) -> None:
    app = load_app_or_exit(args.app)
    routes = app.router.routes
    if not routes:
        print("No routes registered.")
        return

    header = ("METHOD", "TEMPLATE", "HANDLER")
    rows = [header, *((r.method, r.template, _handler_name(r)) for r in routes)]
    method_width = max(len(row[0]) for row in rows)
    template_width = max(len(row[1]) for row in rows)

    lines = [f"{m:<{method_width}}  {t:<{template_width}}  {h}" for m, t, h in rows]
    lines.insert(1, "-" * min(max(len(line) for line in lines), 80))
    print("\n".join(lines))
