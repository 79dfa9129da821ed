"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, response: Response, next: Next) -> Any: ...

No base class required. The framework checks the shape, not the lineage.

Calling ``await next()`` runs the rest of the chain (later middleware,
then routing and the handler). Not calling it short-circuits: nothing
downstream runs, so the middleware should ``send()`` the response itself.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from larvatus.http.request import Request
from larvatus.http.response import Response

# Runs the remainder of the chain
type Next = Callable[[], Awaitable[Any]]

# The innermost step of a chain run
type Terminal = Callable[[Request, Response], Awaitable[Any]]


class Middleware(Protocol):
    """Protocol for larvatus middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, response: Response, next: Next) -> Any:
            start = time.monotonic()
            response.set_header("X-Started", f"{start:.3f}")
            return await next()

        # Class middleware
        class RequireToken:
            async def __call__(self, request: Request, response: Response, next: Next) -> Any:
                ...
    """

    async def __call__(self, request: Request, response: Response, next: Next) -> Any: ...
