"""Custom Middleware — function and class middleware examples.

Demonstrates:
- Function middleware (timing — adds X-Response-Time before the handler sends)
- Class middleware (token check — short-circuits with 401)
- Passing values to handlers through ``request.state``
- The built-in RequestLogger

Run:
    cd examples/custom_middleware && python app.py
"""

import time
from typing import Any

from larvatus import App, Next, Request, Response
from larvatus.middleware import RequestLogger

app = App()


# ---------------------------------------------------------------------------
# Function middleware: timing
# ---------------------------------------------------------------------------


async def timing(request: Request, response: Response, next: Next) -> Any:
    """Stamp the start time; handlers send, so headers go on first."""
    request.state["started"] = time.monotonic()
    response.set_header("X-Response-Time", "measured")
    return await next()


# ---------------------------------------------------------------------------
# Class middleware: bearer token
# ---------------------------------------------------------------------------


class RequireToken:
    """Reject ``/admin`` requests without the expected bearer token."""

    def __init__(self, token: str, prefix: str = "/admin") -> None:
        self.token = token
        self.prefix = prefix

    async def __call__(self, request: Request, response: Response, next: Next) -> Any:
        if not request.path.startswith(self.prefix):
            return await next()
        if request.headers.get("authorization") != f"Bearer {self.token}":
            app.error_response(response, 401, "Unauthorized")
            return None
        request.state["user"] = "admin"
        return await next()


# ---------------------------------------------------------------------------
# Middleware stack (runs in registration order)
# ---------------------------------------------------------------------------

app.use(RequestLogger())
app.use(timing)
app.use(RequireToken("s3cret"))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/")
async def index(request: Request, response: Response) -> None:
    response.write("public")
    response.send()


@app.get("/admin/dashboard")
async def dashboard(request: Request, response: Response) -> None:
    elapsed = time.monotonic() - request.state["started"]
    response.json({"user": request.state["user"], "elapsed": round(elapsed, 3)})
    response.send()


if __name__ == "__main__":
    app.run()
