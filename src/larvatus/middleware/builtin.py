"""Built-in middleware: request logging.

Because handlers usually ``send()`` the response themselves, middleware
that adds headers must do so *before* calling ``next()``.
"""

import logging
import time
from typing import Any

from larvatus.http.request import Request
from larvatus.http.response import Response
from larvatus.middleware.protocol import Next


class RequestLogger:
    """Log ``METHOD path -> status (ms)`` at INFO once the chain returns.

    Register it first so the timing covers every other link::

        app.use(RequestLogger())
    """

    __slots__ = ("logger",)

    def __init__(self, logger_name: str = "larvatus.access") -> None:
        self.logger = logging.getLogger(logger_name)

    async def __call__(self, request: Request, response: Response, next: Next) -> Any:
        start = time.perf_counter()
        try:
            return await next()
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.logger.info(
                "%s %s -> %d (%.1fms)",
                request.method,
                request.path,
                response.status,
                elapsed_ms,
            )
