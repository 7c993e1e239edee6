"""Errors raised while assembling the worker configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ConfigurationError(RuntimeError):
    """The worker cannot start with the configuration it was given."""


class MissingConfigurationError(ConfigurationError):
    """A required value is set neither in the configuration file nor in the environment."""


class InvalidConfigurationFile(ConfigurationError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid configuration file {path}: {reason}")
        self.path = path
