"""Larvatus CLI — serve an app and inspect its route table.

Entry point registered as ``larvatus`` in ``pyproject.toml``::

    [project.scripts]
    larvatus = "larvatus.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``larvatus`` command."""
    parser = argparse.ArgumentParser(
        prog="larvatus",
        description="Larvatus — a minimal routing and middleware layer for ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- larvatus run -----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an app with uvicorn")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")

    # -- larvatus routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from larvatus.cli._run import run_command

        run_command(args)
    elif args.command == "routes":
        from larvatus.cli._routes import run_routes

        run_routes(args)
