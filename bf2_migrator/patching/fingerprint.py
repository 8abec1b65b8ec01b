"""Provider fingerprints and detection.

A fingerprint is a set of byte sequences ("ridges") which must all be present
in a binary for a provider to be considered active.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from ..exceptions import UnknownOrMixedStateError
from .provider import Provider


def contains_all(data: bytes, ridges: Iterable[bytes]) -> bool:
    """Return True if every ridge occurs in data."""
    return all(ridge in data for ridge in ridges)


@dataclass(frozen=True)
class GameFingerprint:
    """Fingerprint of the game client for one provider."""

    hostname: bytes
    hosts_path: bytes
    # Extra DLL some providers load instead of the system socket library
    helper_library: Optional[bytes] = None
    # Whether the master server host is formatted as "%s.ms%d.<hostname>"
    uses_placeholder: bool = True

    @property
    def ridges(self) -> Tuple[bytes, ...]:
        ridges = (self.hostname, self.hosts_path)
        if self.helper_library:
            ridges += (self.helper_library,)
        return ridges

    def matches(self, data: bytes) -> bool:
        return contains_all(data, self.ridges)


@dataclass(frozen=True)
class ServerFingerprint:
    """Fingerprint of the dedicated server for one provider."""

    hostname: bytes
    # Part of the fingerprint, otherwise a GameSpy server would also match BF2Hub
    dll_name: bytes

    @property
    def ridges(self) -> Tuple[bytes, ...]:
        return (self.hostname, self.dll_name)

    def matches(self, data: bytes) -> bool:
        return contains_all(data, self.ridges)


def detect_provider(data: bytes, fingerprints: Mapping[Provider, object],
                    file_name: Optional[str] = None) -> Provider:
    """Determine which provider a binary is currently patched for.

    Exactly one fingerprint must match. Anything else means the binary
    contains unknown or mixed modifications and must not be touched.

    Raises:
        UnknownOrMixedStateError: if zero or several providers match
    """
    matches = [
        provider for provider, fingerprint in fingerprints.items()
        if contains_all(data, fingerprint.ridges)
    ]

    if len(matches) == 1:
        return matches[0]

    if not matches:
        message = "binary contains unknown modifications, revert changes first"
    else:
        names = ", ".join(str(m) for m in matches)
        message = f"binary contains mixed modifications ({names}), revert changes first"
    raise UnknownOrMixedStateError(message, file_name=file_name, matches=matches)
