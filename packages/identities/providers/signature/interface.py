"""
Interface for wallet signature verification.

Used once, when an identity is created, to prove the caller controls the
wallet being registered or linked.
"""

from abc import ABC, abstractmethod


class SignatureVerifierInterface(ABC):
    """Abstract interface for signature verifiers."""

    @abstractmethod
    async def recover_address(self, message: str, signature: str) -> str:
        """
        Recover the signer address of a personal-sign message.

        Args:
            message: The exact text that was signed
            signature: 0x-prefixed 65-byte signature

        Returns:
            The signer's address

        Raises:
            SignatureVerificationError: If the signature is malformed
        """
        pass

    async def verify(self, wallet_address: str, message: str, signature: str) -> bool:
        """True when ``signature`` over ``message`` was produced by ``wallet_address``."""
        recovered = await self.recover_address(message, signature)
        return recovered.lower() == wallet_address.lower()
