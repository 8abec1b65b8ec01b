"""Application workflows combining patching, processes and accounts."""

from .patch_controller import detect_installation, patch_installation, prepare_for_patch
from .profile_migration import get_login, load_login, migrate_profile

__all__ = [
    "detect_installation",
    "patch_installation",
    "prepare_for_patch",
    "get_login",
    "load_login",
    "migrate_profile",
]
