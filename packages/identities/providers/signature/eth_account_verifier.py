"""
EIP-191 personal-sign verification backed by eth-account.
"""

import re

from eth_account import Account
from eth_account.messages import encode_defunct

from common.core.exceptions import SignatureVerificationError
from common.core.telemetry import trace_span, get_logger
from packages.identities.providers.signature.interface import (
    SignatureVerifierInterface,
)

logger = get_logger(__name__)

SIGNATURE_PATTERN = re.compile(r"^0x[a-fA-F0-9]{130}$")


class EthAccountSignatureVerifier(SignatureVerifierInterface):
    """Recovers signers of ``personal_sign`` messages (EVM chains)."""

    @trace_span
    async def recover_address(self, message: str, signature: str) -> str:
        if not message:
            raise SignatureVerificationError("Signed message is empty")
        if not SIGNATURE_PATTERN.match(signature or ""):
            raise SignatureVerificationError(
                "Signature must be 0x followed by 130 hex characters"
            )

        try:
            return Account.recover_message(
                encode_defunct(text=message), signature=signature
            )
        except Exception as e:
            logger.warning(f"Signature recovery failed: {e}")
            raise SignatureVerificationError("Signature could not be recovered") from e
