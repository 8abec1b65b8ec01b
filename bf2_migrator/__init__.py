"""BF2 Migrator - move a Battlefield 2 installation between online backends."""

from .version import __version__

__all__ = ["__version__"]
