"""
Key Derivation - BIP-32/44 extended key pairs per coin and network.

Every key pair lives at m/44'/coin_type'/0'/0:
- purpose 44' (hardened)
- coin type (hardened)
- account 0' (hardened)
- external chain 0 (non-hardened)
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from bip_utils import (
    Bip32KeyError,
    Bip32KeyNetVersions,
    Bip32Slip10Secp256k1,
    Bip32Utils,
)

from cold_wallet.networks import (
    CoinConfig,
    NetworkConfig,
    TESTNET_COIN_TYPES_SHARED,
    resolve_coin_type,
)
from .errors import DerivationError

logger = logging.getLogger(__name__)


PURPOSE = 44
ACCOUNT = 0
ADDRESS_INDEX = 0
DERIVATION_PATH = "m/44'/{}'/0'/0"


# ============================================
# Data Classes
# ============================================

@dataclass(frozen=True)
class ExtendedKeyPair:
    """A derived node with both halves serialized (xprv/xpub or tprv/tpub)."""
    path: str
    private_key: str
    public_key: str
    chain_code: bytes


@dataclass(frozen=True)
class PublicKeyOnly:
    """A neutered node: no private component."""
    path: str
    public_key: str
    chain_code: bytes


@dataclass(frozen=True)
class ChainKeys:
    """The key pair derived for one (network, coin) combination."""
    network: NetworkConfig
    coin: CoinConfig
    pair: ExtendedKeyPair


# ============================================
# Derivation
# ============================================

def _key_net_versions(network: NetworkConfig) -> Bip32KeyNetVersions:
    return Bip32KeyNetVersions(network.public_version, network.private_version)


def derive_key_pair(seed_bytes: bytes, network: NetworkConfig,
                    coin_type: int) -> ExtendedKeyPair:
    """
    Derive the extended key pair at m/44'/coin_type'/0'/0.

    Args:
        seed_bytes: BIP-39 seed
        network: Parameter set selecting the serialization version bytes
        coin_type: Unhardened SLIP-44 coin type

    Raises:
        DerivationError: If the master key or any child level is invalid
    """
    path = DERIVATION_PATH.format(coin_type)
    levels = (
        Bip32Utils.HardenIndex(PURPOSE),
        Bip32Utils.HardenIndex(coin_type),
        Bip32Utils.HardenIndex(ACCOUNT),
        ADDRESS_INDEX,
    )

    try:
        node = Bip32Slip10Secp256k1.FromSeed(seed_bytes, _key_net_versions(network))
        for index in levels:
            node = node.ChildKey(index)

        return ExtendedKeyPair(
            path=path,
            private_key=node.PrivateKey().ToExtended(),
            public_key=node.PublicKey().ToExtended(),
            chain_code=node.ChainCode().ToBytes(),
        )
    except (Bip32KeyError, ValueError) as e:
        raise DerivationError(
            f"derivation of {path} on {network.name} failed: {e}"
        ) from e


def neuter(pair: ExtendedKeyPair) -> PublicKeyOnly:
    """Strip the private component of a key pair."""
    return PublicKeyOnly(
        path=pair.path,
        public_key=pair.public_key,
        chain_code=pair.chain_code,
    )


def derive_chain_keys(seed_bytes: bytes,
                      coins: Iterable[CoinConfig],
                      networks: Iterable[NetworkConfig],
                      testnet_coin_types: str = TESTNET_COIN_TYPES_SHARED) -> list[ChainKeys]:
    """
    Derive a key pair for every (network, coin) combination.

    Order is networks first, then coins, both in the order given.
    A failure for any combination aborts the whole batch.
    """
    coins = list(coins)
    results = []
    for network in networks:
        for coin in coins:
            coin_type = resolve_coin_type(network, coin, testnet_coin_types)
            pair = derive_key_pair(seed_bytes, network, coin_type)
            logger.debug(f"Derived {coin.name} on {network.name} at {pair.path}")
            results.append(ChainKeys(network=network, coin=coin, pair=pair))
    return results
