"""Larvatus exception hierarchy.

Shared across Router, App, handlers, and middleware so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class LarvatusError(Exception):
    """Base for all larvatus-specific errors."""


class ConfigurationError(LarvatusError):
    """Raised when routes, middleware, or configuration are invalid.

    Surfaces at registration time or at ``App`` construction, never
    while a request is being served.
    """


class TemplateNotFound(LarvatusError):  # noqa: N818 (mirrors the renderer's vocabulary)
    """Raised by ``View.render`` when the named template does not exist."""


@dataclass(frozen=True, slots=True)
class HTTPError(LarvatusError):
    """An error that maps directly to an HTTP status code.

    Handlers and middleware may raise it. The error-handling link turns
    it into a JSON response with ``status`` and ``{"error": detail}``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 (conventional name in web frameworks)
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class ClientDisconnected(LarvatusError):  # noqa: N818 (names the event, not a failure)
    """Raised while reading a request body when the client goes away.

    The server boundary catches it and dispatches nothing.
    """
