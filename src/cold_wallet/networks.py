"""
Cold Wallet Networks - Coin registry and network parameter sets.

Supports mainnet and testnet key serialization for every registered coin.
"""

from dataclasses import dataclass
from typing import Optional

# ============================================
# Network Configurations
# ============================================

# BIP-44 / SLIP-44 coin type shared by every testnet
TESTNET_COIN_TYPE = 1

TESTNET_COIN_TYPES_SHARED = "shared"
TESTNET_COIN_TYPES_PER_COIN = "per-coin"
TESTNET_COIN_TYPE_POLICIES = (TESTNET_COIN_TYPES_SHARED, TESTNET_COIN_TYPES_PER_COIN)


@dataclass(frozen=True)
class NetworkConfig:
    """Parameter set for one network."""
    name: str
    display_name: str
    prefix: bytes            # Record key marker
    is_testnet: bool
    public_version: bytes    # BIP-32 version bytes (xpub / tpub)
    private_version: bytes   # BIP-32 version bytes (xprv / tprv)
    shared_coin_type: Optional[int] = None


# Iteration order is stable: mainnet first, then testnet
NETWORKS = {
    "mainnet": NetworkConfig(
        name="mainnet",
        display_name="Mainnet",
        prefix=b"main/",
        is_testnet=False,
        public_version=bytes.fromhex("0488b21e"),
        private_version=bytes.fromhex("0488ade4"),
    ),
    "testnet": NetworkConfig(
        name="testnet",
        display_name="Testnet",
        prefix=b"test/",
        is_testnet=True,
        public_version=bytes.fromhex("043587cf"),
        private_version=bytes.fromhex("04358394"),
        shared_coin_type=TESTNET_COIN_TYPE,
    ),
}


# ============================================
# Coin Registry
# ============================================

@dataclass(frozen=True)
class CoinConfig:
    """A supported coin and its SLIP-44 coin type."""
    name: str
    display_name: str
    coin_type: int


COINS = {
    "BTC": CoinConfig(name="BTC", display_name="Bitcoin", coin_type=0),
    "LTC": CoinConfig(name="LTC", display_name="Litecoin", coin_type=2),
    "DOGE": CoinConfig(name="DOGE", display_name="Dogecoin", coin_type=3),
    "DASH": CoinConfig(name="DASH", display_name="Dash", coin_type=5),
    "ETH": CoinConfig(name="ETH", display_name="Ethereum", coin_type=60),
    "ETC": CoinConfig(name="ETC", display_name="Ethereum Classic", coin_type=61),
    "BCH": CoinConfig(name="BCH", display_name="Bitcoin Cash", coin_type=145),
}


# ============================================
# Utility Functions
# ============================================

def supported_coins() -> list[CoinConfig]:
    """All registered coins in registry order."""
    return list(COINS.values())


def supported_networks() -> list[NetworkConfig]:
    """All networks in registry order."""
    return list(NETWORKS.values())


def get_network(name: str) -> Optional[NetworkConfig]:
    """Get network config by name."""
    return NETWORKS.get(name)


def get_coin(name: str) -> Optional[CoinConfig]:
    """Get coin config by name."""
    return COINS.get(name)


def resolve_coin_type(network: NetworkConfig, coin: CoinConfig,
                      testnet_coin_types: str = TESTNET_COIN_TYPES_SHARED) -> int:
    """
    Pick the (unhardened) coin type used on the second derivation level.

    Testnets use the shared SLIP-44 testnet constant unless the
    per-coin policy is selected.
    """
    if testnet_coin_types not in TESTNET_COIN_TYPE_POLICIES:
        raise ValueError(f"Unknown testnet coin type policy: {testnet_coin_types}")

    if (network.shared_coin_type is not None
            and testnet_coin_types == TESTNET_COIN_TYPES_SHARED):
        return network.shared_coin_type
    return coin.coin_type
