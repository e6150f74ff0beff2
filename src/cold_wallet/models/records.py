"""
Vault record layout.

Keys are plain byte concatenations:
    [network prefix][kind prefix][coin name]   e.g. b"main/pub/BTC"
    SEED_PHRASE_KEY                            the seed phrase sentinel

Values are always ciphertext (nonce || AEAD-sealed payload).
"""

from dataclasses import dataclass

from cold_wallet.networks import NetworkConfig

SEED_PHRASE_KEY = b"mk"
PRIVATE_PREFIX = b"prv/"
PUBLIC_PREFIX = b"pub/"


@dataclass(frozen=True)
class VaultRecord:
    """One persisted key/ciphertext pair."""
    key: bytes
    value: bytes


def record_key(network: NetworkConfig, kind_prefix: bytes, coin_name: str) -> bytes:
    """Build the storage key for a key-pair record."""
    return network.prefix + kind_prefix + coin_name.encode('utf-8')


def public_prefix(network: NetworkConfig) -> bytes:
    """Scan prefix covering every public record of a network."""
    return network.prefix + PUBLIC_PREFIX


def export_key(network: NetworkConfig, key: bytes) -> str:
    """Drop the kind marker from a public record key: b"main/pub/BTC" -> "main/BTC"."""
    return (network.prefix + key[len(public_prefix(network)):]).decode('utf-8')
