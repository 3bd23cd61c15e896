"""Domain models for wallet registration."""

from typing import Optional
from pydantic import BaseModel

from packages.billing.models.domain.enums import EntitlementErrorCode
from packages.identities.models.domain.identity import PrimaryIdentity


class RegistrationResult(BaseModel):
    """
    Outcome of a registration attempt.

    Re-registering an existing primary wallet is not an error: the stored
    identity comes back with ``is_existing`` set.
    """

    identity: Optional[PrimaryIdentity] = None
    is_existing: bool = False
    rejection: Optional[EntitlementErrorCode] = None

    @property
    def succeeded(self) -> bool:
        return self.rejection is None
