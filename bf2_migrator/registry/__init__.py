"""Registry access (Windows only)."""

from .key_store import (
    BF2HUB_AUTO_PATCH_VALUES,
    BF2HUB_CLIENT_KEY,
    HKEY_CURRENT_USER,
    HKEY_LOCAL_MACHINE,
    KeyStore,
    RegistryKeyStore,
    disable_competing_patcher,
)

__all__ = [
    "BF2HUB_AUTO_PATCH_VALUES",
    "BF2HUB_CLIENT_KEY",
    "HKEY_CURRENT_USER",
    "HKEY_LOCAL_MACHINE",
    "KeyStore",
    "RegistryKeyStore",
    "disable_competing_patcher",
]
