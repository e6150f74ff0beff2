"""
Wallet package - Seed phrases, key derivation and encryption.

Contains:
- Seed phrase generation, validation and seed derivation
- BIP-32/44 extended key pair derivation
- Cipher: passphrase-keyed AES-256-GCM
- Error taxonomy (ErrorKind, WalletError and subclasses)

The lifecycle controller lives in wallet.manager.
"""

from .errors import (
    ErrorKind,
    WalletError,
    InvalidPhraseError,
    WalletExistsError,
    WrongPassphraseError,
    NoWalletError,
    StorageError,
    RandomSourceError,
    EntropyError,
    DerivationError,
)
from .crypto import (
    Cipher,
    KdfConfig,
    derive_key,
    KDF_ARGON2ID,
    KDF_LEGACY_MD5,
)
from .seed import (
    generate_phrase,
    validate_phrase,
    derive_seed,
    normalize_phrase,
)
from .derivation import (
    ExtendedKeyPair,
    PublicKeyOnly,
    ChainKeys,
    derive_key_pair,
    derive_chain_keys,
    neuter,
)

__all__ = [
    # Errors
    "ErrorKind",
    "WalletError",
    "InvalidPhraseError",
    "WalletExistsError",
    "WrongPassphraseError",
    "NoWalletError",
    "StorageError",
    "RandomSourceError",
    "EntropyError",
    "DerivationError",
    # Crypto
    "Cipher",
    "KdfConfig",
    "derive_key",
    "KDF_ARGON2ID",
    "KDF_LEGACY_MD5",
    # Seed
    "generate_phrase",
    "validate_phrase",
    "derive_seed",
    "normalize_phrase",
    # Derivation
    "ExtendedKeyPair",
    "PublicKeyOnly",
    "ChainKeys",
    "derive_key_pair",
    "derive_chain_keys",
    "neuter",
]
