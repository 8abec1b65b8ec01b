"""Backend account clients."""

from .openspy import BASE_URL, OpenSpyClient, ProfileDTO

__all__ = ["BASE_URL", "OpenSpyClient", "ProfileDTO"]
