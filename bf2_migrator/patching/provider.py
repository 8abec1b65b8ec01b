"""Online backend providers a Battlefield 2 binary can talk to."""

from __future__ import annotations

from enum import Enum

from ..exceptions import ValidationError


class Provider(Enum):
    """Known backend providers."""

    BF2HUB = "BF2Hub"
    PLAYBF2 = "PlayBF2"
    OPENSPY = "OpenSpy"
    GAMESPY = "GameSpy"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Provider":
        """Resolve a provider from its display name or member name (case-insensitive)."""
        wanted = (text or "").strip().lower()
        for provider in cls:
            if provider is cls.UNKNOWN:
                continue
            if wanted in (provider.value.lower(), provider.name.lower()):
                return provider
        choices = ", ".join(p.value for p in cls.known())
        raise ValidationError(
            f"Unknown provider {text!r}, expected one of: {choices}",
            field_name="provider",
        )

    @classmethod
    def known(cls) -> tuple:
        return tuple(p for p in cls if p is not cls.UNKNOWN)
