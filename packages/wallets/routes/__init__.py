"""Wallet portfolio API routes."""

from packages.wallets.routes import wallets

__all__ = ["wallets"]
