"""Wallet signature verifiers."""

from packages.identities.providers.signature.interface import (
    SignatureVerifierInterface,
)
from packages.identities.providers.signature.factory import get_signature_verifier

__all__ = [
    "SignatureVerifierInterface",
    "get_signature_verifier",
]
