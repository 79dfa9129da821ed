"""Server launcher.

Starts a uvicorn server around the live App object. Used by
``App.run()`` and the ``larvatus run`` command.
"""

from __future__ import annotations

from typing import Any


def run_server(
    app: Any,
    host: str,
    port: int,
    *,
    log_level: str = "info",
) -> None:
    """Serve *app* with uvicorn until interrupted.

    uvicorn can take an import string, but larvatus hands it the live
    ASGI callable, so reload and multi-worker modes are unavailable
    here. For those, point uvicorn at ``module:app`` directly.
    """
    import uvicorn

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
        lifespan="on",
    )
