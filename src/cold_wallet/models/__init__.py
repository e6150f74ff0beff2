"""
Models package - Vault records and persistence.

Contains:
- VaultRecord: key/ciphertext pair and the record key layout
- VaultStore: transactional SQLite key/value store
"""

from .records import (
    VaultRecord,
    SEED_PHRASE_KEY,
    PRIVATE_PREFIX,
    PUBLIC_PREFIX,
    record_key,
    public_prefix,
    export_key,
)
from .store import VaultStore, VaultTransaction, MAIN_DATA_BUCKET

__all__ = [
    "VaultRecord",
    "SEED_PHRASE_KEY",
    "PRIVATE_PREFIX",
    "PUBLIC_PREFIX",
    "record_key",
    "public_prefix",
    "export_key",
    "VaultStore",
    "VaultTransaction",
    "MAIN_DATA_BUCKET",
]
