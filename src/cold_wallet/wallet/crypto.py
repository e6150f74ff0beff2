"""
Wallet Crypto - Passphrase-based authenticated encryption.

Industry-standard security:
- Argon2id key derivation (memory-hard)
- AES-256-GCM authenticated encryption
- Fresh random 96-bit nonce per message

Stored format: [nonce 12B][ciphertext + GCM tag 16B]

Keys never exist unencrypted on disk. Never log plaintext, ciphertext
or passphrases.
"""

import hashlib
import secrets
from dataclasses import dataclass, asdict

# Cryptography
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from argon2.low_level import hash_secret_raw, Type

from .errors import RandomSourceError, WrongPassphraseError

# ============================================
# Security Constants
# ============================================

# Argon2id parameters (OWASP recommendations for high-security)
ARGON2_TIME_COST = 3
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_PARALLELISM = 4
ARGON2_HASH_LEN = 32  # 256 bits for AES-256

# Fixed salt: identical passphrases must yield identical keys across runs
ARGON2_SALT = b"cold-wallet/vault-key/v1"

# AES-GCM constants
AES_KEY_SIZE = 32
AES_IV_SIZE = 12  # 96 bits (recommended for GCM)
AES_TAG_SIZE = 16

KDF_ARGON2ID = "argon2id"
KDF_LEGACY_MD5 = "legacy-md5"
KDF_ALGORITHMS = (KDF_ARGON2ID, KDF_LEGACY_MD5)


@dataclass(frozen=True)
class KdfConfig:
    """Passphrase-to-key transform parameters."""
    algorithm: str = KDF_ARGON2ID
    time_cost: int = ARGON2_TIME_COST
    memory_cost: int = ARGON2_MEMORY_COST
    parallelism: int = ARGON2_PARALLELISM

    def __post_init__(self):
        for name in ("time_cost", "memory_cost", "parallelism"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"KDF {name} must be an integer, got {value!r}")
        if not isinstance(self.algorithm, str) or self.algorithm not in KDF_ALGORITHMS:
            raise ValueError(f"Unsupported KDF algorithm: {self.algorithm}")
        if self.time_cost < 1 or self.parallelism < 1:
            raise ValueError("KDF time_cost and parallelism must be positive")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError(
                f"KDF memory_cost must be at least {8 * self.parallelism} KiB"
            )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "KdfConfig":
        fields = ("algorithm", "time_cost", "memory_cost", "parallelism")
        return cls(**{k: data[k] for k in fields if k in data})


# ============================================
# Key Derivation
# ============================================

def derive_key(passphrase: str, kdf: KdfConfig = None) -> bytes:
    """
    Derive the 32-byte AES key for a passphrase.

    Argon2id is memory-hard, making brute-force attacks expensive.
    The legacy transform (hex MD5 digest used directly as the key) is
    fast and unsalted; it only opens vaults sealed with it before.
    """
    kdf = kdf or KdfConfig()

    if kdf.algorithm == KDF_LEGACY_MD5:
        digest = hashlib.md5(passphrase.encode('utf-8'), usedforsecurity=False)
        return digest.hexdigest().encode('ascii')

    return hash_secret_raw(
        secret=passphrase.encode('utf-8'),
        salt=ARGON2_SALT,
        time_cost=kdf.time_cost,
        memory_cost=kdf.memory_cost,
        parallelism=kdf.parallelism,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID
    )


def random_bytes(size: int) -> bytes:
    """Read from the OS CSPRNG; never falls back to a weaker source."""
    try:
        return secrets.token_bytes(size)
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f"secure random source unavailable: {e}") from e


# ============================================
# Cipher
# ============================================

class Cipher:
    """
    AES-256-GCM context keyed by a passphrase.

    Usage:
        cipher = Cipher("my-password")
        blob = cipher.encrypt(b"secret")
        assert cipher.decrypt(blob) == b"secret"
    """

    def __init__(self, passphrase: str, kdf: KdfConfig = None):
        self._aesgcm = AESGCM(derive_key(passphrase, kdf))

    @property
    def nonce_size(self) -> int:
        return AES_IV_SIZE

    def encrypt(self, plaintext: bytes) -> bytes:
        """Seal plaintext under a fresh nonce. Returns nonce || sealed bytes."""
        nonce = random_bytes(AES_IV_SIZE)
        return nonce + self._aesgcm.encrypt(nonce, plaintext, None)

    def decrypt(self, data: bytes) -> bytes:
        """
        Open a nonce-prefixed ciphertext.

        Raises: WrongPassphraseError for a wrong key and for corrupted or
        truncated data alike.
        """
        if data is None or len(data) < AES_IV_SIZE + AES_TAG_SIZE:
            raise WrongPassphraseError()

        nonce, sealed = data[:AES_IV_SIZE], data[AES_IV_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, sealed, None)
        except InvalidTag as e:
            raise WrongPassphraseError() from e

    def encrypt_text(self, text: str) -> bytes:
        return self.encrypt(text.encode('utf-8'))

    def decrypt_text(self, data: bytes) -> str:
        plaintext = self.decrypt(data)
        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise WrongPassphraseError() from e
