"""
Tests for passphrase-keyed AES-256-GCM encryption.
"""
import hashlib

import pytest

from cold_wallet.wallet import crypto
from cold_wallet.wallet.crypto import (
    AES_IV_SIZE,
    AES_TAG_SIZE,
    KDF_LEGACY_MD5,
    Cipher,
    KdfConfig,
    derive_key,
)
from cold_wallet.wallet.errors import ErrorKind, RandomSourceError, WrongPassphraseError

from conftest import FAST_KDF

XPRV = (
    "xprvA1i8CYpVduFUWLTn5ANxaBNZ6z2B1whrZmXXyPpVavo5ZhHfk9ArpQtAMxXAXCv9wSNYNJn"
    "NG1ezsNExJZtP6oCqH5SZm9rVPNmhYjpX2vq"
)


@pytest.fixture
def cipher():
    return Cipher("correct horse", FAST_KDF)


class TestDeriveKey:
    """Tests for the passphrase-to-key transform."""

    def test_argon2id_key_length(self):
        assert len(derive_key("pw", FAST_KDF)) == 32

    def test_deterministic(self):
        assert derive_key("pw", FAST_KDF) == derive_key("pw", FAST_KDF)

    def test_passphrases_differ(self):
        assert derive_key("pw1", FAST_KDF) != derive_key("pw2", FAST_KDF)

    def test_parameters_change_key(self):
        slower = KdfConfig(time_cost=2, memory_cost=1024, parallelism=1)
        assert derive_key("pw", FAST_KDF) != derive_key("pw", slower)

    def test_legacy_md5_is_hex_digest(self):
        kdf = KdfConfig(algorithm=KDF_LEGACY_MD5)
        key = derive_key("pw", kdf)
        assert key == hashlib.md5(b"pw").hexdigest().encode("ascii")
        assert len(key) == 32

    def test_default_is_argon2id(self):
        assert KdfConfig().algorithm == "argon2id"

    @pytest.mark.parametrize("kwargs", [
        {"algorithm": "scrypt"},
        {"time_cost": 0},
        {"parallelism": 0},
        {"memory_cost": 4, "parallelism": 1},
        {"time_cost": "3"},
        {"memory_cost": None},
        {"parallelism": True},
        {"algorithm": None},
    ])
    def test_invalid_kdf_config(self, kwargs):
        with pytest.raises(ValueError):
            KdfConfig(**kwargs)

    def test_kdf_config_dict(self):
        assert KdfConfig.from_dict(FAST_KDF.to_dict()) == FAST_KDF
        assert KdfConfig.from_dict({"time_cost": 2}).memory_cost == KdfConfig().memory_cost


class TestCipher:
    """Tests for encrypt / decrypt."""

    def test_text_round_trip(self, cipher):
        assert cipher.decrypt_text(cipher.encrypt_text(XPRV)) == XPRV

    def test_layout(self, cipher):
        data = cipher.encrypt(b"secret")
        assert len(data) == AES_IV_SIZE + len(b"secret") + AES_TAG_SIZE
        assert cipher.nonce_size == AES_IV_SIZE

    def test_fresh_nonce_per_call(self, cipher):
        first = cipher.encrypt(b"same")
        second = cipher.encrypt(b"same")
        assert first[:AES_IV_SIZE] != second[:AES_IV_SIZE]
        assert first != second

    def test_same_passphrase_interoperates(self):
        data = Cipher("pw", FAST_KDF).encrypt_text(XPRV)
        assert Cipher("pw", FAST_KDF).decrypt_text(data) == XPRV

    def test_different_passphrases_produce_different_ciphertext(self):
        first = Cipher("pw1", FAST_KDF).encrypt(b"message")
        second = Cipher("pw2", FAST_KDF).encrypt(b"message")
        assert first != second

    def test_wrong_passphrase(self):
        data = Cipher("pw1", FAST_KDF).encrypt(b"message")
        with pytest.raises(WrongPassphraseError) as exc_info:
            Cipher("pw2", FAST_KDF).decrypt(data)
        assert exc_info.value.kind is ErrorKind.WRONG_PASSPHRASE

    def test_tampered_data_reports_wrong_passphrase(self, cipher):
        data = bytearray(cipher.encrypt(b"message"))
        data[-1] ^= 0x01
        with pytest.raises(WrongPassphraseError):
            cipher.decrypt(bytes(data))

    @pytest.mark.parametrize("data", [None, b"", b"\x00" * (AES_IV_SIZE + AES_TAG_SIZE - 1)])
    def test_truncated_data(self, cipher, data):
        with pytest.raises(WrongPassphraseError):
            cipher.decrypt(data)

    def test_empty_plaintext(self, cipher):
        assert cipher.decrypt(cipher.encrypt(b"")) == b""

    def test_legacy_cipher_round_trip(self):
        legacy = Cipher("pw", KdfConfig(algorithm=KDF_LEGACY_MD5))
        assert legacy.decrypt_text(legacy.encrypt_text("phrase")) == "phrase"

    def test_random_source_failure(self, cipher, monkeypatch):
        def broken(size):
            raise OSError("no entropy")

        monkeypatch.setattr(crypto.secrets, "token_bytes", broken)
        with pytest.raises(RandomSourceError) as exc_info:
            cipher.encrypt(b"message")
        assert exc_info.value.kind is ErrorKind.RANDOM_SOURCE
