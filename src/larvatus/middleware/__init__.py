"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, response: Response, next: Next) -> Any

Built-in middleware:
    ErrorHandler -- Outermost link; installed by the App automatically
    RequestLogger -- Access log line per request
"""

from larvatus.middleware.builtin import RequestLogger
from larvatus.middleware.chain import MiddlewareChain
from larvatus.middleware.errors import ErrorHandler
from larvatus.middleware.protocol import Middleware, Next

__all__ = [
    "ErrorHandler",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "RequestLogger",
]
