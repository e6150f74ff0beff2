"""
Logging - Application logging configuration and disk persistence.

Provides:
- Python logging configuration with console and optional file output
- Log persistence to daily files: cold-wallet-YYYY-MM-DD.log
- Automatic cleanup of old log files

Log records name coins, networks, paths and counts. Phrases,
passphrases, keys and ciphertexts are never logged.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
import logging

LOG_FILE_PREFIX = "cold-wallet-"
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
CONSOLE_DATE_FORMAT = '%H:%M:%S'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: int | str = logging.INFO,
                      retention_days: int = 0,
                      logs_dir: Optional[Path] = None) -> None:
    """
    Configure Python logging for the application.

    Sets up a root logger with console output and, when retention_days
    is positive, a daily log file under logs_dir.

    Args:
        level: Logging level (default: INFO)
        retention_days: If 0, don't save to disk
        logs_dir: Directory for daily log files
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(level)

    # Console handler with simple format
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=CONSOLE_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if retention_days > 0 and logs_dir is not None:
        file_handler = logging.FileHandler(get_log_file_path(logs_dir), encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
        root_logger.addHandler(file_handler)
        cleanup_old_logs(logs_dir, retention_days)


def get_log_file_path(logs_dir: Path, date: Optional[datetime] = None) -> Path:
    """Get the log file path for a specific date (defaults to today)."""
    if date is None:
        date = datetime.now()
    return logs_dir / f"{LOG_FILE_PREFIX}{date.strftime('%Y-%m-%d')}.log"


def cleanup_old_logs(logs_dir: Path, retention_days: int) -> int:
    """
    Delete log files older than retention_days.

    Args:
        logs_dir: Directory holding daily log files
        retention_days: Delete files older than this (0 = delete all
            but today's)

    Returns:
        Number of files deleted
    """
    if retention_days < 0 or not logs_dir.exists():
        return 0

    cutoff_date = (datetime.now() - timedelta(days=retention_days)).date()
    deleted_count = 0

    for file_path in logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"):
        date_str = file_path.stem[len(LOG_FILE_PREFIX):]
        try:
            file_date = datetime.strptime(date_str, "%Y-%m-%d").date()
        except ValueError:
            # Not one of ours
            continue

        if file_date < cutoff_date:
            file_path.unlink(missing_ok=True)
            deleted_count += 1

    return deleted_count
