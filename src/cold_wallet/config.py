"""
Configuration - Process settings built once at startup.

Resolved from the home directory and an optional settings.json, then
passed explicitly to the components that need it.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cold_wallet.networks import TESTNET_COIN_TYPE_POLICIES, TESTNET_COIN_TYPES_SHARED
from cold_wallet.utils import (
    get_app_dir,
    get_db_path,
    get_logs_dir,
    get_settings_path,
    set_secure_permissions,
)
from cold_wallet.wallet.crypto import KdfConfig
from cold_wallet.wallet.seed import SEED_ENTROPY_BITS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _is_int(value) -> bool:
    # JSON true/false load as bool, which subclasses int
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class WalletConfig:
    """Settings for one wallet home directory."""
    app_dir: Path
    db_path: Path
    seed_entropy_bits: int = SEED_ENTROPY_BITS
    testnet_coin_types: str = TESTNET_COIN_TYPES_SHARED
    kdf: KdfConfig = field(default_factory=KdfConfig)
    log_level: str = "INFO"
    log_retention_days: int = 0  # 0 = no log files

    def __post_init__(self):
        if self.testnet_coin_types not in TESTNET_COIN_TYPE_POLICIES:
            raise ValueError(
                f"testnet_coin_types must be one of {TESTNET_COIN_TYPE_POLICIES}, "
                f"got {self.testnet_coin_types!r}"
            )
        if not _is_int(self.seed_entropy_bits) or self.seed_entropy_bits <= 0:
            raise ValueError(f"Invalid seed_entropy_bits: {self.seed_entropy_bits!r}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level!r}")
        self.log_level = self.log_level.upper()
        if not _is_int(self.log_retention_days) or self.log_retention_days < 0:
            raise ValueError(f"Invalid log_retention_days: {self.log_retention_days!r}")

    @property
    def settings_path(self) -> Path:
        return get_settings_path(self.app_dir)

    @property
    def logs_dir(self) -> Path:
        return get_logs_dir(self.app_dir)

    def to_dict(self) -> dict:
        """Settings file fields (paths are derived, never stored)."""
        return {
            "seed_entropy_bits": self.seed_entropy_bits,
            "testnet_coin_types": self.testnet_coin_types,
            "kdf": self.kdf.to_dict(),
            "log_level": self.log_level,
            "log_retention_days": self.log_retention_days,
        }

    @classmethod
    def load(cls, home: Optional[str | Path] = None) -> "WalletConfig":
        """
        Build the configuration for a home directory.

        Args:
            home: Home directory; defaults to COLD_WALLET_HOME or ~/.coldWallet

        Raises:
            ValueError: If settings.json holds an invalid value
        """
        app_dir = get_app_dir(home)
        settings = _read_settings(get_settings_path(app_dir))

        kwargs = {}
        for name in ("seed_entropy_bits", "testnet_coin_types", "log_level", "log_retention_days"):
            if name in settings:
                kwargs[name] = settings[name]
        if "kdf" in settings:
            if not isinstance(settings["kdf"], dict):
                raise ValueError("kdf settings must be an object")
            kwargs["kdf"] = KdfConfig.from_dict(settings["kdf"])

        config = cls(app_dir=app_dir, db_path=get_db_path(app_dir), **kwargs)
        logger.debug(f"Loaded configuration from {app_dir}")
        return config

    def save(self) -> None:
        """Write settings.json atomically with owner-only permissions."""
        path = self.settings_path
        temp_path = path.with_suffix('.tmp')
        with open(temp_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
        set_secure_permissions(temp_path)

        temp_path.replace(path)
        set_secure_permissions(path)


def _read_settings(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Unreadable settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must hold a JSON object")
    return data
