"""Template rendering for handlers, backed by kida.

``View`` satisfies the ``TemplateRenderer`` protocol. It is independent
of routing: handlers call it and write the result to the response.

``kida`` is an optional dependency (``pip install larvatus[templates]``).
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from larvatus.errors import ConfigurationError, TemplateNotFound


class View:
    """Render templates from a directory with shared and per-call data.

    Usage::

        view = View("templates")
        view.set("site_name", "Larvatus")

        @app.get("/")
        async def home(request, response):
            response.write(view.render("home.html", {"title": "Welcome"}))
            response.send()
    """

    __slots__ = ("_data", "_env", "path")

    def __init__(self, path: str | Path) -> None:
        try:
            from kida import Environment, FileSystemLoader
        except ImportError:
            msg = (
                "View requires the 'kida' template engine. "
                "Install it with: pip install larvatus[templates]"
            )
            raise ConfigurationError(msg) from None

        self.path = Path(path)
        self._data: dict[str, Any] = {}
        self._env = Environment(loader=FileSystemLoader(str(self.path)))

    def set(self, key: str, value: Any) -> None:
        """Make *value* available to every template rendered by this view."""
        self._data[key] = value

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render template *name*; *data* overrides shared values.

        Raises ``TemplateNotFound`` if the file does not exist under
        the view's directory.
        """
        template_path = self.path / name
        if not template_path.is_file():
            msg = f"Template not found: {template_path}"
            raise TemplateNotFound(msg)

        context = {**self._data, **(data or {})}
        return self._env.get_template(name).render(context)
