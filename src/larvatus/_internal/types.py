"""Type aliases shared by the server boundary and the registration API.

Only ``server`` and ``app`` see raw ASGI messages; handlers and
middleware work with ``Request`` and ``Response``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Message: TypeAlias = MutableMapping[str, Any]
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]

# handler(request, response), sync or async
Handler: TypeAlias = Callable[..., Any]

# body(router), called while a group prefix is pushed
GroupBody: TypeAlias = Callable[..., Any]
