"""Windows registry access used by the install finder and patch preparation."""

from __future__ import annotations

import logging
import sys
from typing import Mapping, Protocol

from ..exceptions import RegistryKeyNotFoundError, RegistryUnavailableError

logger = logging.getLogger(__name__)

HKEY_CURRENT_USER = "HKCU"
HKEY_LOCAL_MACHINE = "HKLM"

BF2HUB_CLIENT_KEY = "SOFTWARE\\BF2Hub Systems\\BF2Hub Client"
BF2HUB_AUTO_PATCH_VALUES = {
    "hrpApplyOnStartup": 0,
    "hrpInterval": 0,
}


class KeyStore(Protocol):
    def read_string(self, root: str, path: str, name: str) -> str:
        ...

    def set_dword_values(self, root: str, path: str, values: Mapping[str, int]) -> None:
        ...


def _winreg():
    if sys.platform != "win32":
        raise RegistryUnavailableError(f"Windows registry is not available on {sys.platform}")
    import winreg
    return winreg


def _root_key(winreg, root: str):
    roots = {
        HKEY_CURRENT_USER: winreg.HKEY_CURRENT_USER,
        HKEY_LOCAL_MACHINE: winreg.HKEY_LOCAL_MACHINE,
    }
    try:
        return roots[root]
    except KeyError:
        raise ValueError(f"Unsupported registry root: {root}")


class RegistryKeyStore:
    """KeyStore backed by winreg."""

    def read_string(self, root: str, path: str, name: str) -> str:
        winreg = _winreg()
        try:
            with winreg.OpenKey(_root_key(winreg, root), path, 0, winreg.KEY_QUERY_VALUE) as key:
                value, _ = winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            raise RegistryKeyNotFoundError(
                f"registry value {name!r} not found", key_path=f"{root}\\{path}",
            )
        return str(value)

    def set_dword_values(self, root: str, path: str, values: Mapping[str, int]) -> None:
        winreg = _winreg()
        try:
            key = winreg.OpenKey(
                _root_key(winreg, root), path, 0, winreg.KEY_QUERY_VALUE | winreg.KEY_SET_VALUE,
            )
        except FileNotFoundError:
            raise RegistryKeyNotFoundError("registry key not found", key_path=f"{root}\\{path}")

        with key:
            for name, value in values.items():
                winreg.SetValueEx(key, name, 0, winreg.REG_DWORD, int(value))


def disable_competing_patcher(store: KeyStore) -> bool:
    """Stop the BF2Hub client from re-patching the game binary on startup.

    Returns False if the BF2Hub client is not installed, which is fine since it
    then cannot interfere with patching. Any other error propagates.
    """
    try:
        store.set_dword_values(HKEY_CURRENT_USER, BF2HUB_CLIENT_KEY, BF2HUB_AUTO_PATCH_VALUES)
    except RegistryKeyNotFoundError:
        logger.info("BF2Hub client not installed, no auto-patcher to disable")
        return False

    logger.info("Disabled BF2Hub client auto-patching")
    return True
