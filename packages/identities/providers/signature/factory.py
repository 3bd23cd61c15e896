"""
Factory for getting the signature verifier instance.
"""

from common.core.config import settings
from common.core.constants import SignatureProvider
from packages.identities.providers.signature.interface import (
    SignatureVerifierInterface,
)
from packages.identities.providers.signature.eth_account_verifier import (
    EthAccountSignatureVerifier,
)


def get_signature_verifier() -> SignatureVerifierInterface:
    """
    Get the configured signature verifier.

    Returns:
        SignatureVerifierInterface: verifier for ``settings.signature_provider``
    """
    if settings.signature_provider == SignatureProvider.ETH_ACCOUNT:
        return EthAccountSignatureVerifier()
    raise ValueError(f"Unsupported signature provider: {settings.signature_provider}")
