"""Database models for identities."""

from packages.identities.models.database.identity import (
    PrimaryIdentityEntity,
    LinkedIdentityEntity,
)

__all__ = [
    "PrimaryIdentityEntity",
    "LinkedIdentityEntity",
]
