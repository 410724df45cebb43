"""Daemon configuration.

Built once at startup from the parsed command line and the environment, then
passed by value to the components that need it. Nothing re-reads argv or the
environment later.
"""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator


class DaemonConfig(BaseModel):
    """Immutable startup configuration."""

    on_exit: str = Field("", description="Sway command run when the daemon is terminated")
    log_level: str = Field("INFO", description="Logging level name")
    socket_path: Optional[str] = Field(None, description="Sway IPC socket (None = auto-detect)")

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept any standard logging level name, case-insensitively."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_args(cls, args, environ: Optional[Mapping[str, str]] = None) -> "DaemonConfig":
        """Build the configuration from parsed CLI arguments and the environment.

        Args:
            args: argparse namespace with an ``on_exit`` attribute
            environ: Environment mapping (defaults to os.environ)

        Returns:
            DaemonConfig
        """
        if environ is None:
            environ = os.environ

        return cls(
            on_exit=args.on_exit or "",
            log_level=environ.get("LOG_LEVEL", "INFO"),
            socket_path=environ.get("SWAYSOCK") or environ.get("I3SOCK") or None,
        )
