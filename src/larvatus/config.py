"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from larvatus.errors import ConfigurationError

ENVIRONMENTS = ("production", "development")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(environment="development", port=3000)
    """

    # Error display mode: "development" exposes exception detail in 500 bodies
    environment: str = "production"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Sent with every Response.json() payload; empty string disables it
    content_security_policy: str = "default-src 'self'"

    def __post_init__(self) -> None:
        if self.environment not in ENVIRONMENTS:
            msg = (
                f"Unknown environment {self.environment!r}. "
                f"Expected one of: {', '.join(ENVIRONMENTS)}"
            )
            raise ConfigurationError(msg)

    @property
    def debug(self) -> bool:
        """True in development mode."""
        return self.environment == "development"

    @classmethod
    def from_env(
        cls,
        prefix: str = "LARVATUS_",
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Build a config from environment variables.

        Reads ``{prefix}ENV``, ``{prefix}HOST``, ``{prefix}PORT``,
        ``{prefix}LOG_LEVEL``, and ``{prefix}MAX_CONTENT_LENGTH``.
        Missing variables keep their defaults. Intended to be called
        once at startup.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if f"{prefix}ENV" in env:
            values["environment"] = env[f"{prefix}ENV"].strip().lower()
        if f"{prefix}HOST" in env:
            values["host"] = env[f"{prefix}HOST"]
        if f"{prefix}LOG_LEVEL" in env:
            values["log_level"] = env[f"{prefix}LOG_LEVEL"].lower()

        for name, key in (("port", "PORT"), ("max_content_length", "MAX_CONTENT_LENGTH")):
            raw = env.get(f"{prefix}{key}")
            if raw is None:
                continue
            try:
                values[name] = int(raw)
            except ValueError:
                msg = f"{prefix}{key} must be an integer, got {raw!r}"
                raise ConfigurationError(msg) from None

        return cls(**values)  # type: ignore[arg-type]
