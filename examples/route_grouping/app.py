"""Route grouping — a JSON users API under ``/api``.

Demonstrates ``app.group()``, ``:id`` path parameters, the parsed
request body for POST/PUT, and a ``Repository`` collaborator. Storage is
an in-memory dict; swap ``MemoryRepository`` for anything with the same
shape.

Run:
    cd examples/route_grouping && python app.py
"""

import threading
from collections.abc import Mapping
from typing import Any

from larvatus import App, AppConfig, NotFound, Request, Response, Router
from larvatus.collaborators import Repository

app = App(AppConfig(environment="development"))


# ---------------------------------------------------------------------------
# In-memory storage (thread-safe for free-threading)
# ---------------------------------------------------------------------------


class MemoryRepository:
    """A ``Repository`` over a dict, keyed by auto-incrementing int ids."""

    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find(self, id: Any) -> Mapping[str, Any] | None:
        with self._lock:
            return self._rows.get(id)

    def all(self) -> list[Mapping[str, Any]]:
        with self._lock:
            return list(self._rows.values())

    def create(self, data: Mapping[str, Any]) -> int:
        with self._lock:
            new_id = self._next_id
            self._next_id += 1
            self._rows[new_id] = {**data, "id": new_id}
            return new_id

    def update(self, id: Any, data: Mapping[str, Any]) -> bool:
        with self._lock:
            if id not in self._rows:
                return False
            self._rows[id] = {**self._rows[id], **data, "id": id}
            return True

    def delete(self, id: Any) -> bool:
        with self._lock:
            return self._rows.pop(id, None) is not None


users: Repository = MemoryRepository()


def _user_id(request: Request) -> int:
    raw = request.params["id"]
    if not raw.isdigit():
        raise NotFound("User not found")
    return int(raw)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def list_users(request: Request, response: Response) -> None:
    response.json(users.all())
    response.send()


async def show_user(request: Request, response: Response) -> None:
    user = users.find(_user_id(request))
    if user is None:
        app.error_response(response, 404, "User not found")
        return
    response.json(user)
    response.send()


async def create_user(request: Request, response: Response) -> None:
    user_id = users.create(dict(request.parsed_body))
    response.set_status(201).json({"message": "User created", "user_id": user_id})
    response.send()


async def update_user(request: Request, response: Response) -> None:
    if not users.update(_user_id(request), dict(request.parsed_body)):
        app.error_response(response, 404, "User not found or not updated")
        return
    response.json({"message": "User updated"})
    response.send()


async def delete_user(request: Request, response: Response) -> None:
    if not users.delete(_user_id(request)):
        app.error_response(response, 404, "User not found or not deleted")
        return
    response.json({"message": "User deleted"})
    response.send()


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


def api(router: Router) -> None:
    router.get("/users", list_users)
    router.get("/users/:id", show_user)
    router.post("/users", create_user)
    router.put("/users/:id", update_user)
    router.delete("/users/:id", delete_user)


app.group("/api", api)


if __name__ == "__main__":
    app.run()
