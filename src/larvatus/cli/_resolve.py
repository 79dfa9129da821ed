"""Turn a ``"module:attribute"`` import string into a larvatus App."""

import importlib
import sys
from functools import reduce

from larvatus.app import App


def resolve_app(import_string: str) -> App:
    """Import the module and walk the attribute path to an App.

    ``"myapp"`` means ``"myapp:app"``. The attribute part may be dotted
    (``"myapp:site.app"``). If it names a plain callable rather than an
    App, it is treated as a factory and called with no arguments.

    Raises:
        ModuleNotFoundError: the module cannot be imported.
        AttributeError: a name along the attribute path is missing.
        TypeError: the factory failed, or the result is not an ``App``.
    """
    module_path, _, attr_path = import_string.partition(":")
    module = importlib.import_module(module_path)
    obj = reduce(getattr, (attr_path or "app").split("."), module)

    if not isinstance(obj, App) and callable(obj):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, App):
        msg = f"{import_string!r} is a {type(obj).__name__}, not a larvatus.App"
        raise TypeError(msg)
    return obj


def load_app_or_exit(import_string: str) -> App:
    """``resolve_app`` for CLI commands: print the problem and exit 1."""
    try:
        return resolve_app(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
