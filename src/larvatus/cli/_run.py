"""``larvatus run``: serve an app with uvicorn."""

import argparse

from larvatus.cli._resolve import load_app_or_exit


def run_command(args: argparse.Namespace) -> None:
    """Serve ``args.app``; ``--host``/``--port`` override its config."""
    load_app_or_exit(args.app).run(host=args.host, port=args.port)
