"""
Wallets package - linking additional wallets under a primary identity.
"""
