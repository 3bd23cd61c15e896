"""Identity API routes."""

from packages.identities.routes import identities

__all__ = ["identities"]
