from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class SignatureProvider(str, Enum):
    """Wallet signature verification backends."""

    ETH_ACCOUNT = "eth_account"
