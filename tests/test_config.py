"""
Tests for configuration loading, paths and logging setup.
"""
import json
import logging
import os
import stat
from datetime import datetime, timedelta

import pytest

from cold_wallet.config import WalletConfig
from cold_wallet.networks import (
    NETWORKS,
    TESTNET_COIN_TYPES_PER_COIN,
    TESTNET_COIN_TYPES_SHARED,
    get_coin,
    resolve_coin_type,
)
from cold_wallet.services.logging import cleanup_old_logs, configure_logging, get_log_file_path
from cold_wallet.utils import APP_DIR_NAME, HOME_ENV_VAR, get_app_dir
from cold_wallet.wallet.crypto import KDF_LEGACY_MD5, KdfConfig


class TestHomeResolution:
    """Tests for locating the wallet home directory."""

    def test_explicit_home(self, tmp_path):
        home = tmp_path / "explicit"
        assert get_app_dir(home) == home
        assert home.is_dir()

    def test_env_var(self, tmp_path, monkeypatch):
        monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path / "from-env"))
        assert get_app_dir() == tmp_path / "from-env"

    def test_default_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv(HOME_ENV_VAR, raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_app_dir() == tmp_path / APP_DIR_NAME

    def test_db_path(self, home):
        config = WalletConfig.load(home)
        assert config.app_dir == home
        assert config.db_path == home / "main.db"


class TestSettings:
    """Tests for settings.json."""

    def test_defaults(self, home):
        config = WalletConfig.load(home)
        assert config.seed_entropy_bits == 128
        assert config.testnet_coin_types == TESTNET_COIN_TYPES_SHARED
        assert config.kdf == KdfConfig()
        assert config.log_level == "INFO"
        assert config.log_retention_days == 0

    def test_overrides(self, home):
        (home / "settings.json").write_text(json.dumps({
            "testnet_coin_types": "per-coin",
            "kdf": {"algorithm": KDF_LEGACY_MD5},
            "log_level": "debug",
            "log_retention_days": 7,
            "unknown_key": True,
        }))
        config = WalletConfig.load(home)
        assert config.testnet_coin_types == TESTNET_COIN_TYPES_PER_COIN
        assert config.kdf.algorithm == KDF_LEGACY_MD5
        assert config.log_level == "DEBUG"
        assert config.log_retention_days == 7

    @pytest.mark.parametrize("settings", [
        {"testnet_coin_types": "mixed"},
        {"log_level": "LOUD"},
        {"log_retention_days": -1},
        {"seed_entropy_bits": "many"},
        {"kdf": {"algorithm": "rot13"}},
        {"kdf": "argon2id"},
        {"kdf": {"time_cost": "3"}},
        {"kdf": {"memory_cost": 65536.0}},
        {"kdf": {"parallelism": True}},
        {"kdf": {"algorithm": 7}},
        {"log_level": 5},
        {"log_retention_days": True},
    ])
    def test_invalid_values(self, home, settings):
        (home / "settings.json").write_text(json.dumps(settings))
        with pytest.raises(ValueError):
            WalletConfig.load(home)

    def test_unreadable_file(self, home):
        (home / "settings.json").write_text("{not json")
        with pytest.raises(ValueError):
            WalletConfig.load(home)

    def test_save_round_trip(self, home):
        config = WalletConfig.load(home)
        config.testnet_coin_types = TESTNET_COIN_TYPES_PER_COIN
        config.kdf = KdfConfig(time_cost=4)
        config.save()

        reloaded = WalletConfig.load(home)
        assert reloaded.testnet_coin_types == TESTNET_COIN_TYPES_PER_COIN
        assert reloaded.kdf.time_cost == 4
        assert not (home / "settings.tmp").exists()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
    def test_save_is_owner_only(self, home):
        config = WalletConfig.load(home)
        config.save()
        mode = stat.S_IMODE(os.stat(config.settings_path).st_mode)
        assert mode == 0o600


class TestCoinTypes:
    """Tests for the testnet coin type policy."""

    def test_mainnet_uses_coin_type(self):
        assert resolve_coin_type(NETWORKS["mainnet"], get_coin("ETH")) == 60

    def test_testnet_shared(self):
        assert resolve_coin_type(NETWORKS["testnet"], get_coin("ETH")) == 1

    def test_testnet_per_coin(self):
        coin_type = resolve_coin_type(
            NETWORKS["testnet"], get_coin("ETH"), TESTNET_COIN_TYPES_PER_COIN
        )
        assert coin_type == 60

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            resolve_coin_type(NETWORKS["testnet"], get_coin("BTC"), "random")


class TestLogging:
    """Tests for log file naming and retention."""

    def test_log_file_path(self, tmp_path):
        path = get_log_file_path(tmp_path, datetime(2026, 2, 8))
        assert path == tmp_path / "cold-wallet-2026-02-08.log"

    def test_cleanup_old_logs(self, tmp_path):
        old = get_log_file_path(tmp_path, datetime.now() - timedelta(days=10))
        recent = get_log_file_path(tmp_path, datetime.now() - timedelta(days=1))
        stray = tmp_path / "cold-wallet-notes.log"
        for path in (old, recent, stray):
            path.write_text("line\n")

        assert cleanup_old_logs(tmp_path, retention_days=7) == 1
        assert not old.exists()
        assert recent.exists()
        assert stray.exists()

    def test_cleanup_missing_dir(self, tmp_path):
        assert cleanup_old_logs(tmp_path / "missing", retention_days=1) == 0

    def test_configure_logging_skips_when_configured(self, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [logging.NullHandler()])
        configure_logging(logging.DEBUG)
        assert len(root.handlers) == 1

    def test_configure_logging_file_handler(self, tmp_path, monkeypatch):
        root = logging.getLogger()
        monkeypatch.setattr(root, "handlers", [])
        monkeypatch.setattr(root, "level", root.level)
        configure_logging(logging.INFO, retention_days=3, logs_dir=tmp_path)
        try:
            assert any(isinstance(h, logging.FileHandler) for h in root.handlers)
            assert get_log_file_path(tmp_path).exists()
        finally:
            for handler in root.handlers:
                handler.close()
