"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from larvatus._internal.types import Handler
from larvatus.routing.pattern import CompiledPattern

# The only methods the route table knows about. Anything else never matches.
METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route: method, compiled pattern, and handler.

    Created once at registration time and never mutated.
    """

    method: str
    pattern: CompiledPattern
    handler: Handler

    @property
    def template(self) -> str:
        """The full template, group prefixes included."""
        return self.pattern.template


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]

    @property
    def handler(self) -> Handler:
        return self.route.handler
