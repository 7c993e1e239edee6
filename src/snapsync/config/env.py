"""Environment lookups shared by the configuration loaders."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import MissingConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name``; blank values count as unset."""

    value = (os.getenv(name) or "").strip()
    return value or None


def require_env_var(name: str, *, hint: str | None = None) -> str:
    value = optional_env_var(name)
    if value is None:
        detail = f" ({hint})" if hint else ""
        raise MissingConfigurationError(f"Missing configuration for: {name}{detail}")
    return value


def env_path(name: str, default: str) -> Path:
    return Path(optional_env_var(name) or default).expanduser()
