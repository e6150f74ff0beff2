"""
Cold Wallet - Offline multi-chain key vault.

Derives BIP-44 key pairs for several coins from one seed phrase and
keeps them encrypted at rest in a local transactional store.
"""

__version__ = "1.0.0"
