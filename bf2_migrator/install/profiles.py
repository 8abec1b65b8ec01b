"""Locate Battlefield 2 player profiles.

Profiles live in numbered folders ("0001", "0002", ...) below the profiles
directory. Each holds a Profile.con; the profiles directory itself holds a
Global.con naming the default profile.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ..exceptions import ProfileNotFoundError

logger = logging.getLogger(__name__)

GLOBAL_CON = "Global.con"
PROFILE_CON = "Profile.con"
GLOBAL_CON_KEY_DEFAULT_USER = "GlobalSettings.setDefaultUser"
PROFILE_CON_KEY_NAME = "LocalProfile.setName"

_CON_LINE = re.compile(r'^\s*(?P<key>[\w.]+)\s+"?(?P<value>[^"]*)"?\s*$')


@dataclass(frozen=True)
class Profile:
    key: str
    name: str
    path: Path

    @property
    def profile_con(self) -> Path:
        return self.path / PROFILE_CON


def default_profiles_dir() -> Path:
    return Path.home() / "Documents" / "Battlefield 2" / "Profiles"


def read_con_file(path: Union[str, Path]) -> Dict[str, str]:
    """Parse a .con file into a key/value mapping."""
    values = {}
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    for line in text.splitlines():
        match = _CON_LINE.match(line)
        if match:
            values[match.group("key")] = match.group("value")
    return values


def list_profiles(profiles_dir: Union[str, Path]) -> List[Profile]:
    """Return the profiles in profiles_dir, ordered by key.

    The "Default" template folder and folders without a Profile.con are skipped.

    Raises:
        ProfileNotFoundError: if profiles_dir does not exist
    """
    profiles_dir = Path(profiles_dir)
    if not profiles_dir.is_dir():
        raise ProfileNotFoundError(
            f"profiles directory not found: {profiles_dir}", profiles_dir=str(profiles_dir),
        )

    profiles = []
    for entry in sorted(profiles_dir.iterdir()):
        if not entry.is_dir() or not entry.name.isdigit():
            continue
        con_path = entry / PROFILE_CON
        if not con_path.is_file():
            logger.warning("Profile folder %s has no %s, skipping", entry, PROFILE_CON)
            continue
        name = read_con_file(con_path).get(PROFILE_CON_KEY_NAME) or entry.name
        profiles.append(Profile(key=entry.name, name=name, path=entry))

    logger.debug("Found %d profile(s) in %s", len(profiles), profiles_dir)
    return profiles


def get_default_profile_key(profiles_dir: Union[str, Path]) -> Optional[str]:
    """Key of the profile the game starts with, None if Global.con names none."""
    global_con = Path(profiles_dir) / GLOBAL_CON
    if not global_con.is_file():
        logger.debug("No %s in %s", GLOBAL_CON, profiles_dir)
        return None
    return read_con_file(global_con).get(GLOBAL_CON_KEY_DEFAULT_USER) or None


def find_profile(profiles: Sequence[Profile], wanted: Optional[str] = None,
                 default_key: Optional[str] = None) -> Profile:
    """Pick a profile by key or name, falling back to the default profile.

    Keys compare numerically, so "1" selects profile "0001". Names compare
    case-insensitively.

    Raises:
        ProfileNotFoundError: if no profile matches
    """
    if not wanted:
        if default_key is None:
            raise ProfileNotFoundError("no default profile set, name a profile explicitly")
        wanted = default_key

    for profile in profiles:
        if wanted.isdigit() and int(wanted) == int(profile.key):
            return profile
    for profile in profiles:
        if profile.name.casefold() == wanted.casefold():
            return profile

    raise ProfileNotFoundError(f"profile not found: {wanted}", profile=wanted)
