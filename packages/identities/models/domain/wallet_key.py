"""
Validated (wallet address, blockchain id) lookup key.
"""

import re

from pydantic import BaseModel, ValidationError as PydanticValidationError, field_validator

from common.core.exceptions import ValidationError

WALLET_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
BLOCKCHAIN_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class WalletKey(BaseModel):
    """
    A wallet on a chain.

    ``wallet_address`` keeps the caller's casing; ``normalized_address`` is
    the case-insensitive lookup key.
    """

    wallet_address: str
    blockchain_id: str

    @field_validator("wallet_address", mode="before")
    @classmethod
    def validate_wallet_address(cls, v):
        if not isinstance(v, str):
            raise ValueError("wallet address must be a string")
        v = v.strip()
        if not WALLET_ADDRESS_PATTERN.match(v):
            raise ValueError("wallet address must be 0x followed by 40 hex characters")
        return v

    @field_validator("blockchain_id", mode="before")
    @classmethod
    def validate_blockchain_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str):
            raise ValueError("blockchain id must be a string")
        v = v.strip()
        if not BLOCKCHAIN_ID_PATTERN.match(v):
            raise ValueError("blockchain id must be 1-64 characters of [A-Za-z0-9_-]")
        return v

    @property
    def normalized_address(self) -> str:
        return self.wallet_address.lower()

    @classmethod
    def parse(cls, wallet_address: str, blockchain_id: str) -> "WalletKey":
        """Build a key or raise the application ValidationError."""
        try:
            return cls(wallet_address=wallet_address, blockchain_id=blockchain_id)
        except PydanticValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ValidationError(f"Invalid wallet input: {messages}") from e
