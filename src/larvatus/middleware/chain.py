"""Ordered middleware chain composed into a single onion-shaped call.

The chain is walked with an index cursor over an ordered sequence, so
the same instance serves any number of requests without being drained.
"""

import inspect
from collections.abc import Iterator, Sequence
from typing import Any

from larvatus._internal.invoke import invoke
from larvatus.errors import ConfigurationError
from larvatus.http.request import Request
from larvatus.http.response import Response
from larvatus.middleware.protocol import Middleware, Terminal


class MiddlewareChain:
    """An ordered list of middleware ending in a terminal step.

    Usage::

        chain = MiddlewareChain()
        chain.add(auth)
        chain.add(timing)
        await chain.run(request, response, dispatch)

    ``auth`` runs first; its ``next()`` runs ``timing``, whose ``next()``
    runs ``dispatch``. Entries are appended and never removed.

    Links must be ``async def`` functions or objects with an
    ``async def __call__``. The handler at the end may be either.
    """

    __slots__ = ("_middleware",)

    def __init__(self, middleware: Sequence[Middleware] = ()) -> None:
        self._middleware: list[Middleware] = []
        for link in middleware:
            self.add(link)

    def add(self, middleware: Middleware) -> None:
        """Append *middleware* to the end of the chain.

        Raises ``ConfigurationError`` unless *middleware* is async.
        """
        if not _is_async_callable(middleware):
            msg = (
                f"Middleware {middleware!r} must be an async function or have an "
                "async __call__; next() has to be awaited."
            )
            raise ConfigurationError(msg)
        self._middleware.append(middleware)

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)

    async def run(self, request: Request, response: Response, terminal: Terminal) -> Any:
        """Run the chain for one request and return link 0's result.

        Each ``next`` closure is bound to a position, not to shared
        state, so calling it twice re-runs the downstream links.
        """
        links = tuple(self._middleware)

        async def call(index: int) -> Any:
            if index == len(links):
                return await invoke(terminal, request, response)

            async def next_() -> Any:
                return await call(index + 1)

            return await invoke(links[index], request, response, next_)

        return await call(0)


def _is_async_callable(obj: Any) -> bool:
    if inspect.iscoroutinefunction(obj):
        return True
    return inspect.iscoroutinefunction(getattr(obj, "__call__", None))
