from __future__ import annotations

import random
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import pytest

from bf2_migrator.patching import Provider
from bf2_migrator.patching.modification import NULL, pad_right
from bf2_migrator.patching.targets import (
    GAME_EXECUTABLE_NAME,
    GAME_FINGERPRINTS,
    HOSTS_PATH_LENGTH,
    LIBRARY_NAME_LENGTH,
    MASTER_SERVER_LENGTH,
    SERVER_EXECUTABLE_NAME,
    SERVER_FINGERPRINTS,
    SYSTEM_SOCKET_LIBRARY,
    _LOGIN_HOSTNAME_RULES,
    _SHARED_HOSTNAME_RULES,
    master_server_host,
)

# x86 function prologue, contains no null bytes and no host strings
FILLER = b"\x55\x8b\xec\x83\xec\x10\x90\x90"
HEADER = b"MZ\x90\xff\xff\xb8"


def _hostname_fields(rules, hostname: bytes) -> List[bytes]:
    fields = []
    for template, length, count in rules:
        fields.extend([pad_right(template % hostname, NULL, length)] * count)
    return fields


def _join(fields: Iterable[bytes], rng: Optional[random.Random] = None) -> bytes:
    if rng is None:
        return HEADER + FILLER + FILLER.join(fields) + FILLER
    # Shuffled fields separated by gaps of varying size
    fields = list(fields)
    rng.shuffle(fields)
    return HEADER + b"".join(FILLER * rng.randint(1, 64) + f for f in fields) + FILLER


def build_game_binary(provider: Provider, rng: Optional[random.Random] = None) -> bytes:
    """Synthetic BF2.exe as shipped or patched for provider."""
    fp = GAME_FINGERPRINTS[provider]
    fields = [pad_right(fp.hosts_path, NULL, HOSTS_PATH_LENGTH)]
    fields += _hostname_fields(_SHARED_HOSTNAME_RULES, fp.hostname)
    fields += _hostname_fields(_LOGIN_HOSTNAME_RULES, fp.hostname)
    fields.append(pad_right(master_server_host(fp), NULL, MASTER_SERVER_LENGTH))
    fields.append(pad_right(fp.helper_library or SYSTEM_SOCKET_LIBRARY, NULL, LIBRARY_NAME_LENGTH))
    return _join(fields, rng)


def build_server_binary(provider: Provider, rng: Optional[random.Random] = None) -> bytes:
    """Synthetic bf2_w32ded.exe as shipped or patched for provider."""
    fp = SERVER_FINGERPRINTS[provider]
    fields = _hostname_fields(_SHARED_HOSTNAME_RULES, fp.hostname)
    fields.append(pad_right(fp.dll_name, NULL, LIBRARY_NAME_LENGTH))
    return _join(fields, rng)


BUILDERS = {
    GAME_EXECUTABLE_NAME: build_game_binary,
    SERVER_EXECUTABLE_NAME: build_server_binary,
}


@pytest.fixture
def binary_for() -> Callable[..., bytes]:
    def _build(file_name: str, provider: Provider, rng: Optional[random.Random] = None) -> bytes:
        return BUILDERS[file_name](provider, rng)
    return _build


@pytest.fixture
def make_install(tmp_path: Path) -> Callable[..., Path]:
    """Create an install directory with the game and optionally the server."""

    def _make(provider: Provider, with_server: bool = True) -> Path:
        install_dir = tmp_path / "Battlefield 2"
        install_dir.mkdir(exist_ok=True)
        (install_dir / GAME_EXECUTABLE_NAME).write_bytes(build_game_binary(provider))
        if with_server:
            (install_dir / SERVER_EXECUTABLE_NAME).write_bytes(build_server_binary(provider))
        return install_dir

    return _make


@pytest.fixture
def make_profiles(tmp_path: Path) -> Callable[..., Path]:
    """Create a profiles directory; profiles maps key to (name, nick, email)."""

    def _make(profiles, default_key: Optional[str] = None) -> Path:
        profiles_dir = tmp_path / "Profiles"
        (profiles_dir / "Default").mkdir(parents=True, exist_ok=True)
        for key, (name, nick, email) in profiles.items():
            profile_dir = profiles_dir / key
            profile_dir.mkdir(exist_ok=True)
            lines = [f'LocalProfile.setName "{name}"']
            if nick:
                lines.append(f'LocalProfile.setGamespyNick "{nick}"')
            if email:
                lines.append(f'LocalProfile.setEMail "{email}"')
            lines.append("LocalProfile.setTotalPlayedTime 1234")
            (profile_dir / "Profile.con").write_text("\n".join(lines) + "\n", encoding="utf-8")
        if default_key is not None:
            (profiles_dir / "Global.con").write_text(
                f'GlobalSettings.setDefaultUser "{default_key}"\n'
                "GlobalSettings.setNamePrefix \"\"\n",
                encoding="utf-8",
            )
        return profiles_dir

    return _make
