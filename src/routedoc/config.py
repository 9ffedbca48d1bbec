"""Application configuration.

Values can be passed explicitly or read from the environment:

- ``ROUTEDOC_ENVIRONMENT``: free-form tag, ``development`` by default
- ``ROUTEDOC_DEBUG``: ``true/1/yes/on`` enables debug diagnostics
"""

import os

from pydantic import BaseModel

TRUTHY = ("true", "1", "yes", "on")


class AppConfig(BaseModel):
    """Configuration consumed by an ``Application``."""

    environment: str = "development"
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            environment=os.getenv("ROUTEDOC_ENVIRONMENT", "development"),
            debug=os.getenv("ROUTEDOC_DEBUG", "false").lower() in TRUTHY,
        )
