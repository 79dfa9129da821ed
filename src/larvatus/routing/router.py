"""Per-method route table with ordered, first-match-wins lookup.

Routes are registered during setup. Each method owns an insertion-ordered
dict keyed by compiled pattern, so re-registering a template replaces the
handler in place instead of adding an unreachable second candidate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from larvatus._internal.types import GroupBody, Handler
from larvatus.errors import ConfigurationError
from larvatus.routing.pattern import CompiledPattern, compile_template
from larvatus.routing.route import METHODS, Route, RouteMatch

logger = logging.getLogger("larvatus.routing")


class Router:
    """Route table with prefix grouping.

    Usage::

        router = Router()
        router.get("/users/:id", show_user)

        def api(r: Router) -> None:
            r.post("/users", create_user)

        router.group("/api", api)
        match = router.match("GET", "/users/42")  # RouteMatch or None
    """

    __slots__ = ("_prefixes", "_table")

    def __init__(self) -> None:
        self._table: dict[str, dict[CompiledPattern, Route]] = {m: {} for m in METHODS}
        self._prefixes: list[str] = []

    # -- Registration --

    @property
    def prefix(self) -> str:
        """The prefix currently applied to new registrations."""
        return "".join(self._prefixes)

    def add_route(self, method: str, template: str, handler: Handler) -> Route:
        """Compile ``prefix + template`` and register *handler* for *method*.

        Raises ``ConfigurationError`` for methods outside ``METHODS`` and
        for malformed templates.
        """
        if method not in METHODS:
            msg = f"Unsupported method {method!r}. Supported methods: {', '.join(METHODS)}"
            raise ConfigurationError(msg)
        if not callable(handler):
            msg = f"Handler for {method} {template!r} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        pattern = compile_template(self.prefix + template)
        route = Route(method=method, pattern=pattern, handler=handler)
        bucket = self._table[method]
        if pattern in bucket:
            logger.debug("Replacing handler for %s %s", method, pattern.template)
        else:
            logger.debug("Registered %s %s", method, pattern.template)
        bucket[pattern] = route
        return route

    def get(self, template: str, handler: Handler) -> Route:
        return self.add_route("GET", template, handler)

    def post(self, template: str, handler: Handler) -> Route:
        return self.add_route("POST", template, handler)

    def put(self, template: str, handler: Handler) -> Route:
        return self.add_route("PUT", template, handler)

    def delete(self, template: str, handler: Handler) -> Route:
        return self.add_route("DELETE", template, handler)

    def group(self, prefix: str, body: GroupBody) -> None:
        """Register every route added inside *body* under *prefix*.

        *body* is called synchronously with this router. Nested groups
        concatenate prefixes outer-to-inner; the previous prefix is
        restored even if *body* raises.
        """
        with self.prefixed(prefix):
            body(self)

    @contextmanager
    def prefixed(self, prefix: str) -> Iterator[Router]:
        """Context-manager form of :meth:`group`::

        with router.prefixed("/api") as api:
            api.get("/users", list_users)
        """
        self._prefixes.append(prefix)
        try:
            yield self
        finally:
            self._prefixes.pop()

    # -- Lookup --

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route for *method* whose pattern matches *path*.

        Returns ``None`` when the method is unknown or no pattern matches.
        """
        bucket = self._table.get(method)
        if not bucket:
            return None
        for route in bucket.values():
            params = route.pattern.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    @property
    def routes(self) -> list[Route]:
        """All registered routes, grouped by method in registration order."""
        return [route for bucket in self._table.values() for route in bucket.values()]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._table.values())

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)
