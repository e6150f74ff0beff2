"""
Wallet Errors - Closed error taxonomy for vault operations.

Every failure surfaced by the vault carries an ErrorKind. Callers match
on ``err.kind`` rather than testing concrete exception types.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """All failure classes a vault operation can report."""
    INVALID_PHRASE = "invalid_phrase"
    WALLET_EXISTS = "wallet_exists"
    WRONG_PASSPHRASE = "wrong_passphrase"
    NO_WALLET = "no_wallet"
    STORAGE = "storage"
    RANDOM_SOURCE = "random_source"
    ENTROPY = "entropy"
    DERIVATION = "derivation"


class WalletError(Exception):
    """Base exception for all vault errors."""

    kind: ErrorKind
    default_message = "wallet error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidPhraseError(WalletError):
    kind = ErrorKind.INVALID_PHRASE
    default_message = "invalid seed phrase"


class WalletExistsError(WalletError):
    kind = ErrorKind.WALLET_EXISTS
    default_message = "wallet already exists"


class WrongPassphraseError(WalletError):
    # Raised for tampered data as well; the two cases are never told apart
    kind = ErrorKind.WRONG_PASSPHRASE
    default_message = "wrong passphrase"


class NoWalletError(WalletError):
    kind = ErrorKind.NO_WALLET
    default_message = "no wallet found"


class StorageError(WalletError):
    kind = ErrorKind.STORAGE
    default_message = "storage failure"


class RandomSourceError(WalletError):
    kind = ErrorKind.RANDOM_SOURCE
    default_message = "secure random source unavailable"


class EntropyError(WalletError):
    kind = ErrorKind.ENTROPY
    default_message = "invalid entropy size"


class DerivationError(WalletError):
    kind = ErrorKind.DERIVATION
    default_message = "key derivation failed"
