"""
Shared utility functions for Cold Wallet.

Contains path helpers and file permission utilities used across packages.
"""

import os
from pathlib import Path
from typing import Optional

HOME_ENV_VAR = "COLD_WALLET_HOME"
APP_DIR_NAME = ".coldWallet"
DB_FILENAME = "main.db"

APP_DIR_MODE = 0o755
SECURE_FILE_MODE = 0o600  # Owner read/write only


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    Sets file to mode 0600 (owner read/write only) to protect wallet data.
    No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except FileNotFoundError:
            # Nothing to protect yet
            pass


def get_app_dir(home: Optional[str | Path] = None) -> Path:
    """
    Get the application data directory, creating it if missing.

    Resolution order: explicit argument, COLD_WALLET_HOME, ~/.coldWallet
    """
    if home is not None:
        app_dir = Path(home)
    elif os.environ.get(HOME_ENV_VAR):
        app_dir = Path(os.environ[HOME_ENV_VAR])
    else:
        app_dir = Path.home() / APP_DIR_NAME

    app_dir = app_dir.expanduser()
    if not app_dir.exists():
        app_dir.mkdir(mode=APP_DIR_MODE, parents=True)
    return app_dir


def get_db_path(app_dir: Path) -> Path:
    """Get path to the vault database file."""
    return app_dir / DB_FILENAME


def get_settings_path(app_dir: Path) -> Path:
    """Get path to settings file."""
    return app_dir / "settings.json"


def get_logs_dir(app_dir: Path) -> Path:
    """Get the logs directory."""
    logs_dir = app_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
