"""Migrate a Battlefield 2 multiplayer profile to an OpenSpy account."""

from __future__ import annotations

import logging
from typing import Dict, List, Protocol, Tuple

from ..clients.openspy import ProfileDTO
from ..exceptions import ProfileNotFoundError, ValidationError
from ..install.profiles import Profile, read_con_file

logger = logging.getLogger(__name__)

PROFILE_CON_KEY_NICK = "LocalProfile.setGamespyNick"
PROFILE_CON_KEY_EMAIL = "LocalProfile.setEMail"
BF2_NAMESPACE_ID = 12


class AccountClient(Protocol):
    def create_account(self, email: str, password: str, partner_code: int = 0) -> None:
        ...

    def create_profile(self, nick: str, namespace_id: int) -> ProfileDTO:
        ...

    def get_profiles(self) -> List[ProfileDTO]:
        ...


def get_login(profile_con: Dict[str, str]) -> Tuple[str, str]:
    """Return (nick, email) of a multiplayer profile."""
    nick = profile_con.get(PROFILE_CON_KEY_NICK, "").strip()
    email = profile_con.get(PROFILE_CON_KEY_EMAIL, "").strip()
    if not nick:
        raise ValidationError("profile has no GameSpy nick, is it a singleplayer profile?",
                              field_name=PROFILE_CON_KEY_NICK)
    if not email:
        raise ValidationError("profile has no email address", field_name=PROFILE_CON_KEY_EMAIL)
    return nick, email


def load_login(profile: Profile) -> Tuple[str, str]:
    """Read (nick, email) from the Profile.con of an installed profile."""
    try:
        profile_con = read_con_file(profile.profile_con)
    except OSError as e:
        raise ProfileNotFoundError(
            f"failed to read profile config file of {profile.name}: {e}", profile=profile.key,
        ) from e
    return get_login(profile_con)


def migrate_profile(client: AccountClient, nick: str, email: str, password: str,
                    namespace_id: int = BF2_NAMESPACE_ID, partner_code: int = 0) -> bool:
    """Create the OpenSpy account and profile for a player.

    Returns True if a new profile was created, False if it already existed.
    """
    client.create_account(email, password, partner_code)

    exists = any(
        profile.uniquenick == nick and profile.namespaceid == namespace_id
        for profile in client.get_profiles()
    )
    if exists:
        logger.info("OpenSpy profile %s already exists", nick)
        return False

    client.create_profile(nick, namespace_id)
    return True
