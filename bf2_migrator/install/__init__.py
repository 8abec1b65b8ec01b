"""Installation directory and profile discovery."""

from .finder import DEFAULT_LOCATIONS, InstallDirFinder, RegistryLocation
from .profiles import (
    Profile,
    default_profiles_dir,
    find_profile,
    get_default_profile_key,
    list_profiles,
    read_con_file,
)

__all__ = [
    "DEFAULT_LOCATIONS",
    "InstallDirFinder",
    "RegistryLocation",
    "Profile",
    "default_profiles_dir",
    "find_profile",
    "get_default_profile_key",
    "list_profiles",
    "read_con_file",
]
