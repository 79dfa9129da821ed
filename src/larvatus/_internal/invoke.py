"""Invoke helpers — call sync or async callables uniformly.

Handlers and middleware can be ``def`` or ``async def``. Any code that
calls user-provided callables goes through :func:`invoke` so the
sync/async check lives in exactly one place.

Usage::

    from larvatus._internal.invoke import invoke

    result = await invoke(handler, request, response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        def show(request, response):
            response.write("hello")

        async def show(request, response):
            response.write(await load_greeting())
            response.send()
    """
    result = func(*args, **kwargs)
    while inspect.isawaitable(result):
        result = await result
    return result
