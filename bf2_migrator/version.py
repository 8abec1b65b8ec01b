"""Version utilities for BF2 Migrator."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.3.0"


def load_version() -> str:
    try:
        version = metadata.version("bf2-migrator")
    except metadata.PackageNotFoundError:
        return __version__
    return version or __version__
