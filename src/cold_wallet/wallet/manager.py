"""
Wallet Manager - Vault lifecycle (create, import, export, backup).

Orchestrates seed phrases, key derivation, encryption and the vault
store. Every key pair record and the seed phrase record of one wallet
are written in a single transaction, so they are always consistent.

Plaintext key material lives only for the duration of one call.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from cold_wallet.config import WalletConfig
from cold_wallet.models.records import (
    PRIVATE_PREFIX,
    PUBLIC_PREFIX,
    SEED_PHRASE_KEY,
    VaultRecord,
    export_key,
    public_prefix,
    record_key,
)
from cold_wallet.models.store import VaultStore, VaultTransaction
from cold_wallet.networks import (
    TESTNET_COIN_TYPES_SHARED,
    CoinConfig,
    NetworkConfig,
    get_network,
    supported_coins,
    supported_networks,
)
from .crypto import Cipher
from .derivation import derive_chain_keys, neuter
from .errors import NoWalletError, WalletExistsError
from .seed import derive_seed, generate_phrase, validate_phrase

logger = logging.getLogger(__name__)


EXPORT_JSON_INDENT = 4


class WalletState(Enum):
    """Whether a wallet is provably present under a passphrase."""
    NO_WALLET = "no_wallet"
    PRESENT = "present"


class WalletManager:
    """
    Lifecycle controller for the single wallet held in a vault store.

    Usage:
        config = WalletConfig.load()
        with VaultStore(config.db_path) as store:
            manager = WalletManager(store, config)
            phrase = manager.create("passphrase")
            keys = manager.export("passphrase")
    """

    def __init__(self, store: VaultStore, config: WalletConfig,
                 coins: Optional[Iterable[CoinConfig]] = None,
                 networks: Optional[Iterable[NetworkConfig]] = None):
        """
        Args:
            store: Open vault store
            config: Process configuration
            coins: Coin registry to derive for (default: all supported coins)
            networks: Networks to derive for (default: mainnet and testnet)
        """
        self.store = store
        self.config = config
        self.coins = list(coins) if coins is not None else supported_coins()
        self.networks = list(networks) if networks is not None else supported_networks()

    @property
    def key_record_count(self) -> int:
        """Key pair records per wallet: private and public, per coin and network."""
        return 2 * len(self.coins) * len(self.networks)

    def _cipher(self, passphrase: str) -> Cipher:
        return Cipher(passphrase, self.config.kdf)

    def _read_phrase(self, txn: VaultTransaction, cipher: Cipher) -> Optional[str]:
        """Decrypt the seed phrase record; None if absent or empty."""
        data = txn.get(SEED_PHRASE_KEY)
        if data is None:
            return None
        return cipher.decrypt_text(data) or None

    # ============================================
    # State
    # ============================================

    def has_wallet_record(self) -> bool:
        """Whether the seed phrase record exists. Nothing is decrypted."""
        return self.store.get(SEED_PHRASE_KEY) is not None

    def state(self, passphrase: str) -> WalletState:
        """
        Resolve the wallet state under a passphrase.

        Raises:
            WrongPassphraseError: If the seed phrase record exists but does
                not decrypt
        """
        cipher = self._cipher(passphrase)
        with self.store.read() as txn:
            phrase = self._read_phrase(txn, cipher)
        return WalletState.PRESENT if phrase else WalletState.NO_WALLET

    # ============================================
    # Create / Import
    # ============================================

    def create(self, passphrase: str, force: bool = False) -> str:
        """
        Create a wallet from a freshly generated seed phrase.

        Args:
            passphrase: Encryption passphrase
            force: Replace any existing wallet

        Returns:
            The new seed phrase. It is not kept anywhere but the vault;
            the caller shows it to the user once.

        Raises:
            WalletExistsError: If a wallet is present and force is False
            WrongPassphraseError: If a wallet record exists under another
                passphrase and force is False
            EntropyError, RandomSourceError, DerivationError, StorageError
        """
        cipher = self._cipher(passphrase)
        if not force:
            self._ensure_absent(cipher)

        phrase = generate_phrase(self.config.seed_entropy_bits)
        count = self._write_wallet(phrase, cipher, force)
        logger.info(f"Created wallet ({count} records, force={force})")
        return phrase

    def import_wallet(self, phrase: str, passphrase: str, force: bool = False) -> None:
        """
        Restore a wallet from an existing seed phrase.

        The phrase is validated before storage is touched. Existence and
        force semantics match create().

        Raises:
            InvalidPhraseError: If the phrase is not 12 valid BIP-39 words
            WalletExistsError, WrongPassphraseError, DerivationError,
            RandomSourceError, StorageError
        """
        phrase = validate_phrase(phrase)
        cipher = self._cipher(passphrase)
        if not force:
            self._ensure_absent(cipher)

        count = self._write_wallet(phrase, cipher, force)
        logger.info(f"Imported wallet ({count} records, force={force})")

    def _ensure_absent(self, cipher: Cipher) -> None:
        with self.store.read() as txn:
            if self._read_phrase(txn, cipher):
                raise WalletExistsError()

    def _build_records(self, phrase: str, cipher: Cipher) -> list[VaultRecord]:
        """Derive and encrypt every record of a wallet. Touches no storage."""
        if self.config.testnet_coin_types == TESTNET_COIN_TYPES_SHARED:
            for net in self.networks:
                if net.shared_coin_type is not None and len(self.coins) > 1:
                    logger.info(
                        f"{net.name} keys use shared coin type "
                        f"{net.shared_coin_type}': every coin gets the same "
                        f"{net.name} key pair"
                    )
        chain_keys = derive_chain_keys(
            derive_seed(phrase),
            self.coins,
            self.networks,
            self.config.testnet_coin_types,
        )

        records = []
        for item in chain_keys:
            public = neuter(item.pair)
            records.append(VaultRecord(
                key=record_key(item.network, PRIVATE_PREFIX, item.coin.name),
                value=cipher.encrypt_text(item.pair.private_key),
            ))
            records.append(VaultRecord(
                key=record_key(item.network, PUBLIC_PREFIX, item.coin.name),
                value=cipher.encrypt_text(public.public_key),
            ))
        records.append(VaultRecord(key=SEED_PHRASE_KEY, value=cipher.encrypt_text(phrase)))
        return records

    def _write_wallet(self, phrase: str, cipher: Cipher, force: bool) -> int:
        """Commit a whole wallet in one transaction. Returns the record count."""
        records = self._build_records(phrase, cipher)

        with self.store.transaction() as txn:
            if force:
                txn.truncate()
            elif self._read_phrase(txn, cipher):
                # A wallet was committed after the first check
                raise WalletExistsError()
            written = txn.put_all(records)

        return written

    # ============================================
    # Export / Backup
    # ============================================

    def export(self, passphrase: str, network: Optional[str] = None) -> dict[str, str]:
        """
        Decrypt every public extended key.

        Args:
            passphrase: Encryption passphrase
            network: Limit to one network by name (default: all)

        Returns:
            Map of "main/BTC"-style identifiers to serialized public
            keys, in ascending key order

        Raises:
            NoWalletError: If no seed phrase record exists
            WrongPassphraseError: If any record fails to decrypt; no
                partial map is returned
            ValueError: If the network name is unknown
        """
        networks = self.networks
        if network is not None:
            selected = get_network(network)
            if selected is None:
                raise ValueError(f"Unknown network: {network}")
            networks = [selected]

        cipher = self._cipher(passphrase)
        keys = {}
        with self.store.read() as txn:
            if self._read_phrase(txn, cipher) is None:
                raise NoWalletError()
            for net in networks:
                for record in txn.scan(public_prefix(net)):
                    keys[export_key(net, record.key)] = cipher.decrypt_text(record.value)

        logger.info(f"Exported {len(keys)} public keys")
        return dict(sorted(keys.items()))

    def export_file(self, path: str | Path, passphrase: str,
                    network: Optional[str] = None) -> dict[str, str]:
        """
        Write export() to a file as indented JSON.

        The file is replaced only once every key has decrypted; on any
        error an existing file at path keeps its previous content.
        """
        path = Path(path)
        keys = self.export(passphrase, network)
        temp_path = path.with_name(path.name + ".tmp")
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(keys, f, indent=EXPORT_JSON_INDENT)
                f.write("\n")
            temp_path.replace(path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return keys

    def backup(self, passphrase: str) -> str:
        """
        Decrypt the stored seed phrase.

        Raises:
            NoWalletError: If the record is absent or empty
            WrongPassphraseError: If it does not decrypt
        """
        cipher = self._cipher(passphrase)
        with self.store.read() as txn:
            phrase = self._read_phrase(txn, cipher)
        if phrase is None:
            raise NoWalletError()
        return phrase
