"""Larvatus application class — the dispatcher.

Mutable during setup (route registration, middleware, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from larvatus._internal.types import GroupBody, Handler, Receive, Scope, Send
from larvatus.config import AppConfig
from larvatus.http.response import Response
from larvatus.middleware.chain import MiddlewareChain
from larvatus.middleware.errors import ErrorHandler, error_response
from larvatus.middleware.protocol import Middleware
from larvatus.routing.router import Router
from larvatus.server.handler import handle_request

logger = logging.getLogger("larvatus.server")


class App:
    """The larvatus application.

    Owns one ``Router`` and one ``MiddlewareChain`` for its whole
    lifetime. Each request gets its own ``Request``/``Response`` pair.

    Usage::

        app = App(AppConfig(environment="development"))

        @app.get("/users/:id")
        async def show_user(request, response):
            response.json({"id": request.params["id"]})
            response.send()

        app.group("/api", lambda r: r.post("/users", create_user))

    Thread safety:
        Registration is single-threaded setup work. Once the first
        request arrives the app freezes and further registration raises
        ``RuntimeError``; the router and chain are then only read.
    """

    __slots__ = (
        "_chain",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._router: Router = Router()
        self._middleware: MiddlewareChain = MiddlewareChain()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._chain: MiddlewareChain | None = None

    @property
    def router(self) -> Router:
        return self._router

    @property
    def middleware(self) -> MiddlewareChain:
        """User middleware in registration order (without the error link)."""
        return self._middleware

    # -- Route registration --

    def add_route(self, method: str, template: str, handler: Handler) -> Handler:
        """Register *handler* for *method* and *template*."""
        self._check_not_frozen()
        self._router.add_route(method, template, handler)
        return handler

    def _register(
        self, method: str, template: str, handler: Handler | None
    ) -> Handler | Callable[[Handler], Handler]:
        if handler is not None:
            return self.add_route(method, template, handler)

        def decorator(func: Handler) -> Handler:
            return self.add_route(method, template, func)

        return decorator

    def get(self, template: str, handler: Handler | None = None) -> Any:
        """Register a GET route. Without *handler*, returns a decorator."""
        return self._register("GET", template, handler)

    def post(self, template: str, handler: Handler | None = None) -> Any:
        """Register a POST route. Without *handler*, returns a decorator."""
        return self._register("POST", template, handler)

    def put(self, template: str, handler: Handler | None = None) -> Any:
        """Register a PUT route. Without *handler*, returns a decorator."""
        return self._register("PUT", template, handler)

    def delete(self, template: str, handler: Handler | None = None) -> Any:
        """Register a DELETE route. Without *handler*, returns a decorator."""
        return self._register("DELETE", template, handler)

    def group(self, prefix: str, body: GroupBody) -> None:
        """Register the routes added by ``body(router)`` under *prefix*."""
        self._check_not_frozen()
        self._router.group(prefix, body)

    # -- Middleware --

    def use(self, middleware: Middleware) -> None:
        """Append *middleware* to the chain.

        Middleware runs in registration order, inside the built-in
        error-handling link. It must be async, since ``next()`` returns
        an awaitable; anything else raises ``ConfigurationError``.
        """
        self._check_not_frozen()
        self._middleware.add(middleware)

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Responses --

    def error_response(self, response: Response, status: int, message: str) -> None:
        """Set *status*, a JSON ``{"error": message}`` body, and send."""
        error_response(response, status, message)

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with uvicorn."""
        from larvatus.server.run import run_server

        self._ensure_frozen()
        run_server(
            self,
            self.config.host if host is None else host,
            self.config.port if port is None else port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._chain is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            chain=self._chain,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request),
        then runs startup/shutdown hooks.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await _run_hooks(self._startup_hooks)
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await _run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the runtime chain.

        The error-handling link goes in front of every user middleware
        so it wraps the whole chain. MUST only be called while holding
        _freeze_lock.
        """
        self._chain = MiddlewareChain((ErrorHandler(debug=self.config.debug), *self._middleware))
        self._frozen = True
        logger.debug(
            "App frozen: %d routes, %d middleware (%s mode)",
            len(self._router),
            len(self._middleware),
            self.config.environment,
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and middleware before calling app.run()."
            )
            raise RuntimeError(msg)


async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
    for hook in hooks:
        result = hook()
        if inspect.isawaitable(result):
            await result
