"""Domain models for identities."""

from packages.identities.models.domain.enums import IdentityKind
from packages.identities.models.domain.wallet_key import WalletKey
from packages.identities.models.domain.identity import (
    TrialState,
    PrimaryIdentity,
    LinkedIdentity,
    Identity,
    ResolvedIdentity,
    PrimaryIdentityCreateModel,
    LinkedIdentityCreateModel,
)

__all__ = [
    "IdentityKind",
    "WalletKey",
    "TrialState",
    "PrimaryIdentity",
    "LinkedIdentity",
    "Identity",
    "ResolvedIdentity",
    "PrimaryIdentityCreateModel",
    "LinkedIdentityCreateModel",
]
