"""Outermost error-handling link.

The App installs one ``ErrorHandler`` in front of every user middleware,
so any exception escaping the rest of the chain ends up here and is
turned into a single JSON response.
"""

import logging
import traceback
from typing import Any

from larvatus.errors import HTTPError
from larvatus.http.request import Request
from larvatus.http.response import Response
from larvatus.middleware.protocol import Next

logger = logging.getLogger("larvatus.server")


def error_body(exc: BaseException, *, debug: bool) -> dict[str, Any]:
    """JSON payload for an unexpected failure.

    Always carries ``error`` (the exception message). In development
    mode the exception type and formatted traceback are added.
    """
    body: dict[str, Any] = {"error": str(exc) or "Internal Server Error"}
    if debug:
        body["type"] = type(exc).__qualname__
        body["traceback"] = traceback.format_exception(exc)
    return body


class ErrorHandler:
    """Catch failures from downstream links and respond with JSON.

    - ``HTTPError``: its status and headers, body ``{"error": detail}``.
    - Any other ``Exception``: status 500, body from :func:`error_body`.

    Output the handler wrote before failing stays in the buffer until
    ``json()`` replaces it. If the failing handler had already sent its
    response, nothing more is sent.
    """

    __slots__ = ("debug",)

    def __init__(self, *, debug: bool = False) -> None:
        self.debug = debug

    async def __call__(self, request: Request, response: Response, next: Next) -> Any:
        try:
            return await next()
        except HTTPError as exc:
            logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
            if response.sent:
                return None
            response.set_status(exc.status)
            for name, value in exc.headers:
                response.set_header(name, value)
            response.json({"error": exc.detail or str(exc.status)})
            response.send()
        except Exception as exc:
            logger.exception("500 %s %s", request.method, request.path)
            if response.sent:
                return None
            response.set_status(500)
            response.json(error_body(exc, debug=self.debug))
            response.send()
        return None


def error_response(response: Response, status: int, message: str) -> None:
    """Respond with ``status`` and ``{"error": message}``, then send."""
    response.set_status(status)
    response.json({"error": message})
    response.send()
