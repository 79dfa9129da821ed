"""Larvatus — a minimal HTTP routing and middleware layer for ASGI.

Maps method + path to a handler, extracts ``:name`` path parameters, and
threads every request through an ordered middleware chain.

Basic usage::

    from larvatus import App

    app = App()

    @app.get("/users/:id")
    async def show_user(request, response):
        response.json({"id": request.params["id"]})
        response.send()

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "LarvatusError",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "NotFound",
    "OutboundResponse",
    "Request",
    "Response",
    "Router",
    "UploadedFile",
    "View",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import larvatus`` fast while providing a clean top-level API.
    """
    if name == "App":
        from larvatus.app import App

        return App

    if name == "AppConfig":
        from larvatus.config import AppConfig

        return AppConfig

    if name == "Request":
        from larvatus.http.request import Request

        return Request

    if name in ("Response", "OutboundResponse"):
        from larvatus.http import response as _resp

        return getattr(_resp, name)

    if name == "UploadedFile":
        from larvatus.http.forms import UploadedFile

        return UploadedFile

    if name == "Router":
        from larvatus.routing.router import Router

        return Router

    if name in ("Middleware", "Next"):
        from larvatus.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "MiddlewareChain":
        from larvatus.middleware.chain import MiddlewareChain

        return MiddlewareChain

    if name == "View":
        from larvatus.view import View

        return View

    if name in ("ConfigurationError", "HTTPError", "LarvatusError", "NotFound"):
        from larvatus import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
