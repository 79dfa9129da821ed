"""Interfaces for services handlers use but the core never calls.

Sessions, data access, and template rendering live outside routing and
middleware. These protocols describe the narrow surface a handler can
expect; any object with the right shape works.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Per-client keyed storage, started once per request by middleware."""

    def start(self) -> None: ...
    def get(self, key: str, default: Any = None) -> Any: ...
    def set(self, key: str, value: Any) -> None: ...


@runtime_checkable
class Repository(Protocol):
    """CRUD access to one named collection (a table, usually).

    ``update`` and ``delete`` return whether a record was affected.
    """

    def find(self, id: Any) -> Mapping[str, Any] | None: ...
    def all(self) -> list[Mapping[str, Any]]: ...
    def create(self, data: Mapping[str, Any]) -> Any: ...
    def update(self, id: Any, data: Mapping[str, Any]) -> bool: ...
    def delete(self, id: Any) -> bool: ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Render a named template with data to a string."""

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str: ...
