"""
Shared fixtures for the cold wallet test suite.

Argon2 parameters are lowered so tests stay fast; the transform itself
is unchanged.
"""
import pytest

from cold_wallet.config import WalletConfig
from cold_wallet.models.store import VaultStore
from cold_wallet.wallet.crypto import KdfConfig
from cold_wallet.wallet.manager import WalletManager

# BIP-39 reference vector (all-zero entropy)
KNOWN_PHRASE = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
OTHER_PHRASE = "legal winner thank year wave sausage worth useful legal winner thank yellow"

FAST_KDF = KdfConfig(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def fast_kdf():
    return FAST_KDF


@pytest.fixture
def home(tmp_path):
    """Empty wallet home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home):
    """Configuration for the temporary home with fast KDF parameters."""
    cfg = WalletConfig.load(home)
    cfg.kdf = FAST_KDF
    return cfg


@pytest.fixture
def store(config):
    """Open vault store, closed after the test."""
    with VaultStore(config.db_path) as vault_store:
        yield vault_store


@pytest.fixture
def manager(store, config):
    return WalletManager(store, config)
