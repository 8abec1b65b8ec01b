"""Patchable Battlefield 2 executables.

Each target knows the fingerprints of every supported provider and how to
build the list of modifications that moves its binary from one provider to
another.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Mapping, Tuple

from ..exceptions import MissingFingerprintError
from .fingerprint import GameFingerprint, ServerFingerprint
from .modification import Modification
from .provider import Provider

GAME_EXECUTABLE_NAME = "BF2.exe"
SERVER_EXECUTABLE_NAME = "bf2_w32ded.exe"

SYSTEM_SOCKET_LIBRARY = b"WS2_32.dll"

# (template, padded length, expected occurrences); "%s" takes the hostname
_SHARED_HOSTNAME_RULES: Tuple[Tuple[bytes, int, int], ...] = (
    (b"gamestats.%s", 21, 2),
    (b"http://stage-net.%s/bf2/getplayerinfo.aspx?pid=", 56, 1),
    # Actual length of the original is 18. "BF2Web.<hostname>" would also match the
    # BF2Web URL below, so an extra trailing null byte avoids the partial match.
    (b"BF2Web.%s", 19, 1),
    (b"http://BF2Web.%s/ASP/", 30, 1),
    (b"%%s.available.%s", 24, 1),
    (b"%%s.master.%s", 21, 1),
)

_LOGIN_HOSTNAME_RULES: Tuple[Tuple[bytes, int, int], ...] = (
    (b"gpcm.%s", 16, 1),
    (b"gpsp.%s", 16, 1),
)

HOSTS_PATH_LENGTH = 18
MASTER_SERVER_LENGTH = 19
LIBRARY_NAME_LENGTH = 10

GAME_FINGERPRINTS: Mapping[Provider, GameFingerprint] = {
    Provider.BF2HUB: GameFingerprint(
        # BF2Hub does not modify the hostname, so it keeps the GameSpy hostname
        hostname=b"gamespy.com",
        hosts_path=b"\\drivers\\xtc\\hosts",
        helper_library=b"bf2hbc.dll",
    ),
    Provider.PLAYBF2: GameFingerprint(
        hostname=b"playbf2.ru",
        hosts_path=b"\\drivers\\etc\\hasts",
        uses_placeholder=False,
    ),
    Provider.OPENSPY: GameFingerprint(
        hostname=b"openspy.net",
        hosts_path=b"\\drivers\\etz\\hosts",
    ),
    Provider.GAMESPY: GameFingerprint(
        hostname=b"gamespy.com",
        hosts_path=b"\\drivers\\etc\\hosts",
    ),
}

SERVER_FINGERPRINTS: Mapping[Provider, ServerFingerprint] = {
    Provider.BF2HUB: ServerFingerprint(hostname=b"gamespy.com", dll_name=b"bf2hub.dll"),
    Provider.PLAYBF2: ServerFingerprint(hostname=b"playbf2.ru", dll_name=SYSTEM_SOCKET_LIBRARY),
    Provider.OPENSPY: ServerFingerprint(hostname=b"openspy.net", dll_name=SYSTEM_SOCKET_LIBRARY),
    Provider.GAMESPY: ServerFingerprint(hostname=b"gamespy.com", dll_name=SYSTEM_SOCKET_LIBRARY),
}


def hostname_modifications(rules, wipe: bytes, apply: bytes) -> List[Modification]:
    return [
        Modification(old=template % wipe, new=template % apply, length=length, count=count)
        for template, length, count in rules
    ]


def master_server_host(fingerprint: GameFingerprint) -> bytes:
    """Master server host format string as embedded in the game client."""
    if fingerprint.uses_placeholder:
        return b"%%s.ms%%d.%s" % fingerprint.hostname
    return b"%%s.ms.%s" % fingerprint.hostname


class PatchTarget(ABC):
    """Base class for an executable that can be patched between providers."""

    file_name: str = ""
    optional: bool = False

    @abstractmethod
    def fingerprints(self) -> Mapping[Provider, object]:
        ...

    @abstractmethod
    def build_modifications(self, old: Provider, new: Provider) -> List[Modification]:
        ...

    def _lookup(self, old: Provider, new: Provider):
        fingerprints = self.fingerprints()

        wipe = fingerprints.get(old)
        if wipe is None:
            raise MissingFingerprintError(
                f"missing fingerprint for old provider: {old}",
                file_name=self.file_name, provider=old,
            )

        apply = fingerprints.get(new)
        if apply is None:
            raise MissingFingerprintError(
                f"missing fingerprint for new provider: {new}",
                file_name=self.file_name, provider=new,
            )

        return wipe, apply

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.file_name!r})"


class GameExecutable(PatchTarget):
    """The game client, BF2.exe."""

    file_name = GAME_EXECUTABLE_NAME

    def fingerprints(self) -> Mapping[Provider, GameFingerprint]:
        return GAME_FINGERPRINTS

    def build_modifications(self, old: Provider, new: Provider) -> List[Modification]:
        wipe, apply = self._lookup(old, new)

        # Default modifications, required for patching any provider
        modifications = [
            Modification(old=wipe.hosts_path, new=apply.hosts_path, length=HOSTS_PATH_LENGTH, count=1),
        ]
        modifications += hostname_modifications(_SHARED_HOSTNAME_RULES, wipe.hostname, apply.hostname)
        modifications += hostname_modifications(_LOGIN_HOSTNAME_RULES, wipe.hostname, apply.hostname)

        # Some providers drop the numeric "%d" verb from the master server host,
        # so the layout on each side decides whether it is removed, added or kept
        modifications.append(Modification(
            old=master_server_host(wipe),
            new=master_server_host(apply),
            length=MASTER_SERVER_LENGTH,
            count=1,
        ))

        # Provider-specific helper libraries are only reverted/applied for that provider
        if wipe.helper_library:
            modifications.append(Modification(
                old=wipe.helper_library, new=SYSTEM_SOCKET_LIBRARY, length=LIBRARY_NAME_LENGTH, count=1,
            ))
        if apply.helper_library:
            modifications.append(Modification(
                old=SYSTEM_SOCKET_LIBRARY, new=apply.helper_library, length=LIBRARY_NAME_LENGTH, count=1,
            ))

        return modifications


class ServerExecutable(PatchTarget):
    """The dedicated server, bf2_w32ded.exe. Absent on client-only installs."""

    file_name = SERVER_EXECUTABLE_NAME
    optional = True

    def fingerprints(self) -> Mapping[Provider, ServerFingerprint]:
        return SERVER_FINGERPRINTS

    def build_modifications(self, old: Provider, new: Provider) -> List[Modification]:
        wipe, apply = self._lookup(old, new)

        modifications = hostname_modifications(_SHARED_HOSTNAME_RULES, wipe.hostname, apply.hostname)
        modifications.append(Modification(
            old=wipe.dll_name, new=apply.dll_name, length=LIBRARY_NAME_LENGTH, count=1,
        ))
        return modifications


ALL_TARGETS: Tuple[PatchTarget, ...] = (GameExecutable(), ServerExecutable())
