"""Client configuration."""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass

VERSION = "0.1.0"
USER_AGENT = f"WeDeploy/{VERSION} (+https://wedeploy.com)"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Configuration for the shared HTTP transport."""

    timeout: float = 60.0
    verify_ssl: bool = True
    user_agent: str = USER_AGENT
    max_workers: int = 8
    debug: bool = False

    @classmethod
    def from_env(cls) -> ClientConfig:
        """
        Build a configuration from ``WEDEPLOY_*`` environment variables.

        Recognized: WEDEPLOY_TIMEOUT, WEDEPLOY_VERIFY_SSL,
        WEDEPLOY_USER_AGENT, WEDEPLOY_MAX_WORKERS, WEDEPLOY_DEBUG.
        """
        config = cls()
        if "WEDEPLOY_TIMEOUT" in os.environ:
            config.timeout = float(os.environ["WEDEPLOY_TIMEOUT"])
        if "WEDEPLOY_VERIFY_SSL" in os.environ:
            config.verify_ssl = _env_bool(os.environ["WEDEPLOY_VERIFY_SSL"])
        if "WEDEPLOY_USER_AGENT" in os.environ:
            config.user_agent = os.environ["WEDEPLOY_USER_AGENT"]
        if "WEDEPLOY_MAX_WORKERS" in os.environ:
            config.max_workers = int(os.environ["WEDEPLOY_MAX_WORKERS"])
        if "WEDEPLOY_DEBUG" in os.environ:
            config.debug = _env_bool(os.environ["WEDEPLOY_DEBUG"])
        return config

    def apply_logging(self) -> None:
        """Switch the package logger to DEBUG when ``debug`` is set."""
        if self.debug:
            logging.getLogger("wedeploy_client").setLevel(logging.DEBUG)


__all__ = ["VERSION", "USER_AGENT", "ClientConfig"]
