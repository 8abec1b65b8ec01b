"""Locate the Battlefield 2 install directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import InstallDirNotFoundError, RegistryKeyNotFoundError
from ..registry.key_store import (
    BF2HUB_CLIENT_KEY,
    HKEY_CURRENT_USER,
    HKEY_LOCAL_MACHINE,
    KeyStore,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryLocation:
    root: str
    path: str
    value_name: str

    def __str__(self) -> str:
        return f"{self.root}\\{self.path}\\{self.value_name}"


DEFAULT_LOCATIONS = (
    RegistryLocation(
        HKEY_LOCAL_MACHINE,
        "SOFTWARE\\WOW6432Node\\Electronic Arts\\EA Games\\Battlefield 2",
        "InstallDir",
    ),
    RegistryLocation(HKEY_CURRENT_USER, BF2HUB_CLIENT_KEY, "bf2Dir"),
)


class InstallDirFinder:
    def __init__(self, store: KeyStore, locations: Sequence[RegistryLocation] = DEFAULT_LOCATIONS):
        self.store = store
        self.locations = tuple(locations)

    def find(self, override: Optional[str] = None) -> Path:
        """Return the first existing install directory.

        An explicit override wins over registry lookups.

        Raises:
            InstallDirNotFoundError: if no candidate directory exists
        """
        tried = []

        if override:
            tried.append(override)
            if Path(override).is_dir():
                return Path(override)
            logger.warning("Configured install directory does not exist: %s", override)

        for location in self.locations:
            tried.append(str(location))
            try:
                value = self.store.read_string(location.root, location.path, location.value_name)
            except RegistryKeyNotFoundError:
                logger.debug("No install directory at %s", location)
                continue

            candidate = Path(value)
            if candidate.is_dir():
                logger.info("Found Battlefield 2 install directory: %s", candidate)
                return candidate
            logger.debug("Install directory from %s does not exist: %s", location, candidate)

        raise InstallDirNotFoundError(
            "failed to determine Battlefield 2 install directory", tried=tried,
        )

